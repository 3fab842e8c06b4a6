class CurrencyLayerError(Exception):
    pass


class ProviderError(CurrencyLayerError):
    pass


class TransportError(ProviderError):
    pass


class ResponseParseError(ProviderError):
    pass


class ServerError(ProviderError):
    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f'Currency Layer responded with an error: Code: {code}. Message: {message}')


class InvalidCurrencyError(CurrencyLayerError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f'Invalid currency symbol: {code}')


class ConversionError(CurrencyLayerError):
    pass
