class SidecarError(Exception):
    """Base class for errors surfaced to API clients."""
    status_code = 500


class ConfigurationUnsupported(SidecarError):
    """The runtime at the requested block does not expose a required pallet."""
    status_code = 400


class InvalidParameter(SidecarError):
    """A request parameter could not be interpreted."""
    status_code = 400
