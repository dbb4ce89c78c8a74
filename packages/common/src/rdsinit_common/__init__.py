"""
rdsinit Common Package.

This package holds the pieces shared by the Initialization Job and the
Initialization Trigger Controller. Both services agree on the same wire
contracts and derive the same invocation identity, so those live here rather
than in either service.

Key modules include:
-   `config`: Centralized, environment-driven configuration.
-   `models`: Pydantic contracts (`InitConfig`, `JobResult`, wire payloads).
-   `identity`: Deterministic invocation identity derivation.
-   `ddl`: The versioned initialization script.
-   `tables`: SQLAlchemy mapping of the table the script creates.
-   `db`: Short-lived database connections through the pooling proxy.
-   `secret_store`: Credential resolution against the secret store.
-   `repositories`: Read access to the initialized schema.
-   `errors`: The exception hierarchy shared by both services.
"""

__version__ = "0.1.0"
