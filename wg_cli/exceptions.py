"""Exceptions raised by peer operations."""


class WgCliError(Exception):
    """Base exception for wg-cli errors"""
    pass


class ConfigError(WgCliError):
    """Raised when the settings file cannot be used"""
    pass


class InvalidNameError(WgCliError, ValueError):
    """Raised when an interface or peer name cannot be used in a filename"""
    pass


class InvalidAddressError(WgCliError, ValueError):
    """Raised when a peer address is not valid CIDR notation"""
    pass


class InterfaceNotFoundError(WgCliError):
    """Raised when an interface configuration file does not exist"""

    def __init__(self, interface: str):
        super().__init__(f"Interface \"{interface}\" not found")
        self.interface = interface


class PeerNotFoundError(WgCliError):
    """Raised when a peer configuration file does not exist"""

    def __init__(self, interface: str, peer: str):
        super().__init__(f"Peer configuration file \"{interface}-{peer}.conf\" not found")
        self.interface = interface
        self.peer = peer


class PeerAlreadyExistsError(WgCliError):
    """Raised when trying to create a peer whose file already exists"""

    def __init__(self, interface: str, peer: str):
        super().__init__(f"Configuration with filename \"{interface}-{peer}.conf\" already exists")
        self.interface = interface
        self.peer = peer


class MalformedPeerRecordError(WgCliError):
    """Raised when a peer file lacks a required field"""
    pass


class PeerBlockNotFoundError(WgCliError):
    """Raised when no [Peer] block in the interface matches the peer's key"""

    def __init__(self, interface: str, peer: str):
        super().__init__(f"Peer \"{peer}\" not found in interface \"{interface}\"")
        self.interface = interface
        self.peer = peer


class TemplateUnreadableError(WgCliError):
    """Raised when the peer template cannot be opened"""
    pass


class InterfaceUpdateError(WgCliError):
    """Raised when the interface configuration file cannot be rewritten"""
    pass


class PeerFileCleanupFailedError(WgCliError):
    """Raised when a peer file could not be deleted after its block was removed"""
    pass


class KeyProviderError(WgCliError):
    """Raised when key generation or derivation produced no usable key"""
    pass
