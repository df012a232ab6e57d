class NetemError(Exception):
    pass


class ParseError(NetemError):
    """Raised when a clause can't be found in a tc text."""

    def __init__(self, msg):
        super().__init__(msg)
        self.msg = msg


class ConfigurationError(NetemError):
    pass


class ConfigurationEnvError(ConfigurationError):
    def __init__(self, variable):
        super().__init__(f"latency config env error: {variable} is not set")
        self.variable = variable


class ConfigurationParseError(ConfigurationError):
    def __init__(self, msg):
        super().__init__(f"latency config parsing error: {msg}")
        self.msg = msg


class NetemExecutionError(NetemError):
    def __init__(self, description):
        super().__init__(description)
        self.description = description
