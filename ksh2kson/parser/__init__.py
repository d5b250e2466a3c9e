from .base import Parser
from .ksh import KSHParser, tokenize_note_line
