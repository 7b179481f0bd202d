"""Client for the Kudu virtual file system API of Azure App Service sites."""

__version__ = "0.1.0"
