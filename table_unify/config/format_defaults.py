"""
Centralized defaults for format readers, writers and connections.

Options in a MappingConfiguration override these values per read or write.
"""


class FormatDefaults:
    """
    Default option values shared by all format collaborators.
    """

    # XML layout
    ROOT_ELEMENT = "data"
    ROW_ELEMENT = "row"

    # Delimited text
    CSV_DELIMITER = ","
    CSV_ENCODING = "utf-8"

    # JSON output
    JSON_INDENT = 2

    # HTTP
    HTTP_TIMEOUT = 30.0
    HTTP_METHOD = "GET"
    RESPONSE_FORMAT = "json"

    # Databases
    DB_DRIVER_MODULE = "pyodbc"
    DB_TIMEOUT = 30
    VARCHAR_LENGTH = 255

    # Document stores
    NOSQL_LIMIT = 0  # 0 = unlimited
    NOSQL_SERVER_SELECTION_TIMEOUT_MS = 5000

    @classmethod
    def to_dict(cls) -> dict:
        """
        Export all defaults as a dictionary.

        Returns:
            Dictionary of all FormatDefaults class attributes.
        """
        return {
            key: getattr(cls, key)
            for key in dir(cls)
            if not key.startswith('_') and key.isupper()
        }

    @classmethod
    def log_summary(cls, logger=None):
        """
        Log a summary of all format defaults.

        Args:
            logger: Optional logger instance. If None, prints to stdout.
        """
        config_dict = cls.to_dict()
        summary = "\n".join([f"  {key}: {value}" for key, value in sorted(config_dict.items())])
        message = f"Format Configuration Defaults:\n{summary}"

        if logger:
            logger.info(message)
        else:
            print(message)
