from .errors import error_response, quote_error_response
