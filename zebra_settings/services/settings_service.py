from typing import Dict

from ..constants import DEFAULT_PORTA, SETTINGS_COMMAND, SETTINGS_END_TEXT
from ..exceptions import FieldMissingError, SettingsParseError
from .document_service import DEFAULT_PARSER, DocumentNode, MarkupParser
from .transport_service import send_command

# Caminhos a partir da raiz <ZEBRA-ELTRON-PERSONALITY>
NAME_PATH         = ("SAVED-SETTINGS", "NAME")
CURRENT_MODE_PATH = ("SAVED-SETTINGS", "PRINT-MODE", "MODE", "CURRENT")
STORED_MODE_PATH  = ("SAVED-SETTINGS", "PRINT-MODE", "MODE", "STORED")


class SettingsDocument:
    """
    Documento de configurações devolvido pelo ^HZS.

    Os campos são lidos sob demanda; cada acesso pode levantar
    FieldMissingError quando a impressora omite algum nó.
    """

    def __init__(self, root: DocumentNode, raw_text: str = ""):
        self.root = root
        self.raw_text = raw_text

    def lookup(self, *path: str) -> str:
        node = self.root
        for i, name in enumerate(path):
            node = node.child(name)
            if node is None:
                raise FieldMissingError("/".join((self.root.tag,) + path[: i + 1]))
        return node.text

    @property
    def name(self) -> str:
        return self.lookup(*NAME_PATH)

    @property
    def current_mode(self) -> str:
        return self.lookup(*CURRENT_MODE_PATH)

    @property
    def stored_mode(self) -> str:
        return self.lookup(*STORED_MODE_PATH)

    def as_dict(self) -> Dict[str, str]:
        return {
            "name": self.name,
            "current_mode": self.current_mode,
            "stored_mode": self.stored_mode,
        }


def parse_settings(text: str, parser: MarkupParser = DEFAULT_PARSER) -> SettingsDocument:
    try:
        root = parser.parse(text)
    except Exception as e:
        raise SettingsParseError(text, e) from e
    return SettingsDocument(root, raw_text=text)


def get_settings(host: str, port: int = DEFAULT_PORTA,
                 parser: MarkupParser = DEFAULT_PARSER, **transport) -> SettingsDocument:
    """
    Consulta as configurações salvas da impressora (^HZS).

    Não tenta de novo nem esconde erros: PrinterConnectionError,
    PrinterTimeoutError e SettingsParseError chegam direto a quem chamou.
    Algumas impressoras devolvem XML quebrado; isso vira SettingsParseError
    com o texto bruto em .raw_text.
    """
    text = send_command(SETTINGS_COMMAND, host, port, SETTINGS_END_TEXT, **transport)
    return parse_settings(text, parser)
