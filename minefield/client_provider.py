import logging
import os
import pathlib
import platform
from temporalio.client import Client
from temporalio.envconfig import ClientConfig

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "localhost:7233"
DEFAULT_NAMESPACE = "default"


# Connects to Temporal using the profile named by TEMPORAL_PROFILE when the
# config file exists, otherwise TEMPORAL_ADDRESS / TEMPORAL_NAMESPACE.
async def get_temporal_client() -> Client:
    config_file_path = get_config_file_path()
    profile_name = os.getenv("TEMPORAL_PROFILE")
    if profile_name and config_file_path.is_file():
        logger.info(f"Connecting to Temporal with profile {profile_name!r}")
        connect_config = ClientConfig.load_client_connect_config(
            profile=profile_name,
            config_file=str(config_file_path),
        )
        return await Client.connect(**connect_config)

    address = os.getenv("TEMPORAL_ADDRESS", DEFAULT_ADDRESS)
    namespace = os.getenv("TEMPORAL_NAMESPACE", DEFAULT_NAMESPACE)
    logger.info(f"Connecting to Temporal at {address} (namespace {namespace})")
    return await Client.connect(address, namespace=namespace)


# Default location of the Temporal TOML config file for this OS.
def get_config_file_path() -> pathlib.Path:
    system = platform.system()

    if system == "Windows":
        app_data = os.getenv("AppData")
        if app_data is None:
            raise RuntimeError("AppData environment variable not set")
        return pathlib.Path(app_data) / "temporalio" / "temporal.toml"

    if system == "Darwin":
        base = pathlib.Path.home() / "Library" / "Application Support"
    else:
        xdg_config_home = os.getenv("XDG_CONFIG_HOME")
        base = pathlib.Path(xdg_config_home) if xdg_config_home else pathlib.Path.home() / ".config"
    return base / "temporalio" / "temporal.toml"
