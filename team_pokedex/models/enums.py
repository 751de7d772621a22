from enum import Enum


class RuntimeEnvironment(str, Enum):
    """Where the dataset consumer runs, which decides how the dataset is loaded."""

    LOCAL_FILE = "file"  # No fetch capability, data is embedded via the sidecar
    HTTP = "http"  # Served page, data.json is fetched over the network
