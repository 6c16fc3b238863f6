class ArchitectError(Exception):
    """Base class for errors reported to the user."""


class ConfigurationError(ArchitectError):
    pass


class NotFoundError(ArchitectError):
    pass


class ProcessStartError(ArchitectError):
    pass


class CommandFailure(ArchitectError):
    def __init__(self, returncode: int, command: str) -> None:
        super().__init__(f"Command exited with status {returncode}: {command}")
        self.returncode = returncode
        self.command = command
