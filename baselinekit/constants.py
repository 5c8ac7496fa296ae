APP_NAME = "baselinekit"

# Environment-style configuration
ENV_BASELINE = "BASELINEKIT_BASELINE"
ENV_BASELINE_REF = "BASELINEKIT_BASELINE_REF"

DEFAULT_BASELINE_URL = "https://github.com/klappy/klappy.dev.git"
DEFAULT_REF = "main"

# Reference reported for local-path baselines
LOCAL_REF = "local"

# Hard ceiling for the ls-remote staleness probe
PROBE_TIMEOUT_SECONDS = 10

SHORT_SHA_LENGTH = 7
