"""CleanStation manufacturing workflow service.

This package contains the backend used to take CleanStation sink orders from
intake to shipping.

High-level architecture
-----------------------

- ``cleanstation.core``:

  - Logging and application error types.
  - SQLModel entities and async repositories for orders, catalog, QC,
    assembly tasks, service orders and notifications.
  - The rule engine (``cleanstation.core.rules``) that turns a sink
    configuration into a bill of materials, a control box selection and a
    Pre-QC checklist.

- ``cleanstation.server``:

  - The FastAPI application, role-gated routers and the standard response
    envelope.

Typical workflow
----------------

1. A production coordinator creates an ``Order`` with one configuration per
   build number.
2. The BOM is generated from the configuration and persisted with the order.
3. Procurement sends out legs/feet parts and tracks them until they return.
4. QC runs the Pre-QC checklist, assemblers work their tasks, and the final QC
   releases the order for shipping.
"""
