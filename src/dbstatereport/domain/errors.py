"""Domain exceptions."""


class InstanceUnreachableError(Exception):
    """Raised when a SQL Server instance cannot be connected to or queried."""

    def __init__(self, instance: str, reason: str):
        self.instance = instance
        self.reason = reason
        super().__init__(f"Failure connecting to {instance}: {reason}")
