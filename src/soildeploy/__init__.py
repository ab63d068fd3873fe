"""soildeploy — deployment driver for the SOILDATA Dataverse stack."""

__version__ = "0.1.0"
