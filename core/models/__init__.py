from .command_record import CommandRecord  # noqa: F401
