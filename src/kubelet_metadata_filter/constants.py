"""Constants for the kubelet metadata filter."""

# Kubelet access
DEFAULT_KUBELET_URL = "https://localhost:10250/pods"
DEFAULT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"
DEFAULT_CONNECT_TIMEOUT_SECONDS = 2.0
DEFAULT_READ_TIMEOUT_SECONDS = 5.0

# Resolver limits
KUBELET_ERROR_BACKOFF_SECONDS = (0.1, 0.5, 1.0)
KUBELET_MAX_REQUESTS_PER_SECOND = 10
POD_CACHE_SIZE = 200  # assuming users run 10-100 pods per node

# Metrics
DEFAULT_METRICS_SINK = "prometheus"
DEFAULT_METRICS_PREFIX = "fluentd"
DEFAULT_METRICS_PORT = 8080

# Metric events
EVENT_SOFT_MISS = "soft_miss"
EVENT_HARD_MISS = "hard_miss"
EVENT_THROTTLED = "throttled"
EVENT_KUBELET_ERROR = "kubelet_error"
EVENT_REFRESH = "refresh"

# Output record fields
FIELD_DOCKER = "docker"
FIELD_KUBERNETES = "kubernetes"

# Command line flag skipping the startup fetch
DRY_RUN_FLAG = "--dry-run"
