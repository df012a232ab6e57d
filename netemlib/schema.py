from jsonschema import Draft7Validator, FormatChecker

from netemlib.errors import ParseError
from netemlib.netem.objects import Distribution

LIMIT_SCHEMA = {
    "type": "object",
    "properties": {
        "packets": {"type": "integer", "description": "Queue size [packets]"},
    },
    "additionalProperties": False,
    "required": ["packets"],
}

DELAY_SCHEMA = {
    "type": "object",
    "properties": {
        "time": {"type": "number", "description": "Delay to apply [ms]"},
        "jitter": {"type": "number", "description": "Jitter to apply [ms]"},
        "correlation": {
            "type": "number",
            "description": "Correlation of the jitter (percentage)",
        },
        "distribution": {
            "type": "string",
            "description": "Distribution of the jitter",
            "format": "distribution",
        },
    },
    "additionalProperties": False,
    "required": ["time"],
}

CONTROLS_SCHEMA = {
    "type": "object",
    "properties": {
        "limit": LIMIT_SCHEMA,
        "delay": DELAY_SCHEMA,
    },
    "additionalProperties": False,
}

REQUEST_SCHEMA = {
    "description": "Netem request",
    "oneOf": [
        {
            "type": "object",
            "properties": {
                "type": {"const": "set"},
                "interface": {"type": "string"},
                "controls": CONTROLS_SCHEMA,
            },
            "additionalProperties": False,
            "required": ["type", "interface", "controls"],
        },
        {
            "type": "object",
            "properties": {
                "type": {"const": "reset"},
                "interface": {"type": "string"},
            },
            "additionalProperties": False,
            "required": ["type", "interface"],
        },
    ],
}

CONFIGURATION_SCHEMA = {
    "description": "Netem configuration read from the environment",
    "type": "object",
    "properties": {
        "interface": {"type": "string"},
        "network_latency": {"type": "number"},
        "limit": {"type": "integer"},
        "jitter": {"type": "number"},
        "correlation": {"type": "number"},
        "distribution": {"type": "string", "format": "distribution"},
    },
    "additionalProperties": False,
    "required": ["interface", "network_latency"],
}

NetemFormatChecker = FormatChecker()


@NetemFormatChecker.checks("distribution")
def is_valid_distribution(instance):
    """One of the canonical distribution names (case sensitive)."""
    if not isinstance(instance, str):
        return False
    try:
        Distribution.parse(instance)
    except ParseError:
        return False
    return True


RequestValidator = Draft7Validator(REQUEST_SCHEMA, format_checker=NetemFormatChecker)

ConfigurationValidator = Draft7Validator(
    CONFIGURATION_SCHEMA, format_checker=NetemFormatChecker
)
