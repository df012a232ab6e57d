# environment variables read by the configuration
ENV_INTERFACE = "INTERFACE"
ENV_NETWORK_LATENCY = "NETWORK_LATENCY"
ENV_NODE_NAME = "NODE_NAME"
ENV_LIMIT = "LIMIT"
ENV_JITTER = "JITTER"
ENV_CORRELATION = "CORRELATION"
ENV_DISTRIBUTION = "DISTRIBUTION"

# prefix of a netem line in `tc qdisc show` output
NETEM_QDISC_PREFIX = "qdisc netem"

API_ROUTE = "/api"
