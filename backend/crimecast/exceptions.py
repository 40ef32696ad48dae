"""Exception hierarchy for the forecast pipeline and its collaborators."""


class CrimeCastError(Exception):
    """Base exception for application errors."""

    pass


class ConfigurationError(CrimeCastError):
    """Required configuration (such as the Gemini API key) is missing."""

    pass


class OracleError(CrimeCastError):
    """Base exception for failures of the LLM-backed oracles."""

    pass


class OracleUnavailableError(OracleError):
    """The oracle call failed, timed out, or produced no output."""

    pass


class OracleMalformedError(OracleError):
    """The oracle answered, but the payload does not match the expected shape."""

    pass


class GeminiClientError(OracleUnavailableError):
    """Transport-level failure talking to the Gemini API."""

    pass
