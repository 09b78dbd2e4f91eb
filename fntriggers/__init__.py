# Environment overrides must be loaded before fntriggers.types.settings reads them
import os
from dotenv import load_dotenv, find_dotenv

try:
    env_file = os.environ.get("ENV_FILE", ".env")
    path = find_dotenv(filename=env_file, raise_error_if_not_found=True, usecwd=True)
    print(f"Loading environment variables from {path}")
    load_dotenv(dotenv_path=path)
except IOError:
    # No file to set environment variables
    pass

__version__ = "0.3.0"
