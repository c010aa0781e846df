""" Common argument parser for the command line front end """
import argparse

# Public API - functions and classes that external scripts should use
__all__ = [
    'BaseArgumentParser',
    'parse_arguments'
]


class BaseArgumentParser:
    """ Base argument parser with common arguments for all commands """

    def __init__(self, description: str | None = None):
        """ Initialize the argument parser with a description """
        self.parser = argparse.ArgumentParser(
            description=description or 'Script with common arguments'
        )
        self.add_base_arguments()

        # Automatically call add_additional_arguments if it exists in the derived class
        if hasattr(self, 'add_additional_arguments'):
            self.add_additional_arguments()

    def add_base_arguments(self) -> None:
        """ Add arguments that every command needs """
        self.parser.add_argument(
            '--log-file',
            type=str,
            default='suno_failover.log',
            help='Log file path (default: suno_failover.log)'
        )
        self.parser.add_argument(
            '--config',
            type=str,
            default='configuration.json',
            help='Configuration file (default: configuration.json, defaults apply when missing)'
        )
        self.parser.add_argument(
            '--credentials',
            type=str,
            default=None,
            help='Credential store file (default: credentials_file from the configuration)'
        )
        self.parser.add_argument(
            '--cookie',
            type=str,
            default=None,
            help='Cookie to start from instead of the active credential in the store'
        )

    def parse(self, argv: list[str] | None = None) -> argparse.Namespace:
        """ Parse and return the command line arguments """
        return self.parser.parse_args(argv)


def parse_arguments(
    description: str | None = None,
    arg_parser: type[BaseArgumentParser] = BaseArgumentParser,
    argv: list[str] | None = None
) -> argparse.Namespace:
    """ Parse arguments using the specified parser class """
    return arg_parser(description).parse(argv)
