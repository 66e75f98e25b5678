"""Exceptions raised by the invoice and statement parsers."""


class InvoiceParseError(ValueError):
    """Base class for terminal invoice parse failures.

    ``str(exc)`` is the message shown to the user.
    """

    default_message = "Falha ao processar o documento."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class MalformedXml(InvoiceParseError):
    """The input text is not well-formed XML."""

    default_message = "Arquivo XML inválido ou corrompido."


class UnrecognizedDocument(InvoiceParseError):
    """The XML parsed, but no invoice data could be located in any dialect."""

    default_message = (
        "Não foi possível extrair dados do XML. "
        "Verifique se é um arquivo de nota fiscal válido."
    )


class StatementParseError(ValueError):
    """The content is not an OFX bank statement."""
