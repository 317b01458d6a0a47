"""
Exceptions for the NettChain SDK
Everything derives from NettChainError so callers have a single catch-all
"""


class NettChainError(Exception):
    # general container for errors
    pass


class CryptoError(NettChainError):
    # raised by the local encryption subsystem
    pass


class MalformedBlobError(CryptoError):
    # raised when a blob is not valid base64, is too short, or has bad padding
    pass


class AuthenticationFailureError(CryptoError):
    # raised when an AES-GCM tag does not verify (tampering or wrong passphrase)
    pass


class DerivationError(CryptoError):
    # raised when a key cannot be derived from a passphrase
    pass


class EncryptionError(CryptoError):
    # the only error kind the Encryption facade lets out; stage is in __cause__
    pass


class ConfigurationError(NettChainError):
    # raised when client settings are missing or invalid
    pass


class PasswordRequiredError(ConfigurationError):
    # raised when no per-call or default wallet password is available
    pass


class KeystoreError(NettChainError):
    # raised when the OS keyring is missing or fails
    pass


class ApiError(NettChainError):
    # base for anything that goes wrong talking to the remote API
    pass


class TransportError(ApiError):
    # raised on connection failures and timeouts
    pass


class HttpStatusError(ApiError):
    # raised when the API answers with a 4xx/5xx status

    def __init__(self, status_code: int, body: str, url: str = ""):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"HTTP Error: {status_code} Response: {body}")


class InvalidResponseError(ApiError):
    # raised when the response body is not JSON
    pass
