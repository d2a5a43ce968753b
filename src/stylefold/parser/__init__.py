from stylefold.parser.errors import ParseError
from stylefold.parser.transformer import decode_string, parse_module, parse_number

__all__ = ["ParseError", "parse_module", "decode_string", "parse_number"]
