class KeyscopeError(Exception):
    pass


class TranslationError(KeyscopeError):
    def __init__(self, virtual_key: int):
        self.virtual_key = virtual_key
        return super().__init__(f"Unable to translate virtual key {virtual_key:#04x} to a scan code")


class SettingsError(KeyscopeError):
    pass


class RecordingError(KeyscopeError):
    pass
