# File: nfparse/parsing/nfse.py
# -*- coding: utf-8 -*-
"""
NFS-e / NF-e XML parser
=======================
• detect_dialect()                  → Dialect of an already parsed tree
• parse_invoice_xml()               → InvoiceFact from raw XML text
• extract_issuer_tax_id_fallback()  → CNPJ do prestador for documents where
                                      the main parse found none

Supported dialects:
  - NFS-e Nacional (SPED)      http://www.sped.fazenda.gov.br/nfse
  - NFS-e São Paulo            http://www.prefeitura.sp.gov.br/nfe
  - ABRASF (and GISS variants)
  - NF-e tradicional (default)
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from lxml import etree as LET

from nfparse.constants import TRACE, WITHHOLDING_THRESHOLD
from nfparse.errors import MalformedXml, UnrecognizedDocument
from .codes import (
    ABRASF_ISS_NOT_WITHHELD,
    ABRASF_ISS_WITHHELD,
    SP_ISS_NOT_WITHHELD,
    SP_ISS_WITHHELD,
    SPED_ISS_NOT_WITHHELD,
    SPED_ISS_WITHHELD,
    Dialect,
    IssFlag,
    RetentionBasis,
)
from .money import dec2, infer_iss_retention, parse_decimal, rate_percent
from .tree import (
    find_all,
    find_first,
    get_first_non_zero,
    get_first_non_zero_in,
    get_nested_text,
    get_text,
    has_element,
    namespace_uri,
)
from .utils import last_day_of_month, normalize_date, only_digits

# module logger
log = logging.getLogger(__name__)

SP_NAMESPACE_MARKER = "prefeitura.sp.gov.br"
SPED_NAMESPACE_MARKER = "sped.fazenda.gov.br"
# Roots of municipal (ABRASF-like) responses
MUNICIPAL_ROOTS = {
    "NFSe",
    "Nfse",
    "CompNfse",
    "ConsultarNfseResposta",
    "ConsultarNfseServicoPrestadoResposta",
    "GerarNfseResposta",
}

ZERO = Decimal("0")


def _t(msg, *args):
    if TRACE:
        log.warning("[TRACE PARSE] " + msg, *args)


# ────────────────────────── resultado ──────────────────────────
@dataclass(frozen=True)
class Withholding:
    """Federal taxes withheld by the service recipient."""

    income_tax: Decimal = ZERO  # IRRF
    social_security_contribution: Decimal = ZERO  # INSS / CP
    social_contribution_on_profit: Decimal = ZERO  # CSLL
    pis_contribution: Decimal = ZERO
    cofins_contribution: Decimal = ZERO

    def total(self) -> Decimal:
        return (
            self.income_tax
            + self.social_security_contribution
            + self.social_contribution_on_profit
            + self.pis_contribution
            + self.cofins_contribution
        )

    def any(self) -> bool:
        return self.total() > 0


@dataclass(frozen=True)
class InvoiceFact:
    """Normalized financial facts of one invoice document.

    Dates are ``YYYY-MM-DD`` strings; ``""`` when the document has no usable
    issue date.  Tax ids contain digits only.
    """

    dialect: Dialect
    issuer_name: str
    issuer_tax_id: str
    issuer_city: str
    issuer_state: str
    recipient_name: str
    recipient_tax_id: str
    recipient_city: str
    recipient_state: str
    issue_date: str
    expected_settlement_date: str
    document_number: str
    gross_value: Decimal
    net_value_as_declared: Decimal
    municipal_tax_value: Decimal
    municipal_tax_rate_percent: Decimal
    withholding: Withholding
    total_federal_withholding: Decimal
    is_municipal_tax_withheld: bool
    iss_retention_basis: RetentionBasis
    has_any_withholding: bool

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping (withholding components inlined)."""
        data = asdict(self)
        data.update(data.pop("withholding"))
        data["dialect"] = self.dialect.value
        data["iss_retention_basis"] = self.iss_retention_basis.value
        return data


# ─────────────────────── resultado intermediário da extração ───────────────────────
@dataclass
class _Party:
    name: str = ""
    tax_id: str = ""
    city: str = ""
    state: str = ""


@dataclass
class _Extraction:
    issuer: _Party = field(default_factory=_Party)
    recipient: _Party = field(default_factory=_Party)
    raw_issue_date: str = ""
    number: str = ""
    gross: Decimal = ZERO
    net: Decimal = ZERO
    iss_value: Decimal = ZERO
    iss_rate: Decimal = ZERO
    withholding: Withholding = field(default_factory=Withholding)
    # document's own aggregate retention field (vTotalRet, TotalRetencoes ...)
    aggregate_withholding: Decimal = ZERO
    other_retentions: Decimal = ZERO
    iss_flag: IssFlag = IssFlag.UNKNOWN

    def federal_total(self) -> Decimal:
        if self.withholding.any():
            total = self.withholding.total()
        else:
            total = self.aggregate_withholding
        return total + self.other_retentions


# ────────────────────────── funções auxiliares ──────────────────────────
def _first_found(node, *names: str):
    """First element found for ``names``, tried in order."""
    for name in names:
        el = find_first(node, name)
        if el is not None:
            return el
    return None


def _first_text(node, *names: str) -> str:
    for name in names:
        txt = get_text(node, name)
        if txt:
            return txt
    return ""


def _flag(raw: str, withheld: set[str], not_withheld: set[str]) -> IssFlag:
    value = (raw or "").strip().lower()
    if value in withheld:
        return IssFlag.WITHHELD
    if value in not_withheld:
        return IssFlag.NOT_WITHHELD
    return IssFlag.UNKNOWN


def _party(el, *, address: str, id_container: str) -> _Party:
    """Name, CNPJ/CPF and address of an ``emit``/``dest``-like block."""
    if el is None:
        return _Party()
    tax_id = (
        get_text(el, "CNPJ")
        or get_nested_text(el, "CpfCnpj", "Cnpj")
        or get_nested_text(el, id_container, "Cnpj")
        or get_nested_text(find_first(el, id_container), "CpfCnpj", "Cnpj")
        or get_text(el, "CPF")
        or get_nested_text(el, "CpfCnpj", "Cpf")
    )
    addr = _first_found(el, address, "Endereco", "end")
    if addr is None:
        addr = el
    return _Party(
        name=_first_text(el, "xNome", "RazaoSocial", "NomeFantasia"),
        tax_id=tax_id,
        city=_first_text(addr, "xMun", "Municipio", "cMun"),
        state=_first_text(addr, "UF", "Uf"),
    )


# ───────────────────────── detecção do dialeto ─────────────────────────
def detect_dialect(doc: LET._ElementTree) -> Dialect:
    """Return the :class:`Dialect` of a parsed document.

    Checks run in a fixed order because dialects share marker elements.
    """
    root = doc.getroot()
    root_name = LET.QName(root).localname
    root_ns = namespace_uri(root)

    if SP_NAMESPACE_MARKER in root_ns:
        return Dialect.NFSE_SAO_PAULO
    if root_name in {"RetornoConsulta", "NFe"} and has_element(
        doc, "RazaoSocialPrestador"
    ):
        # NF-e tradicional also uses <NFe> as root; SP documents carry
        # flat ValorServicos next to the prestador name.
        if root_name == "RetornoConsulta" or has_element(doc, "ValorServicos"):
            return Dialect.NFSE_SAO_PAULO

    has_inf_nfse = has_element(doc, "infNFSe")
    if root_name == "NFSe" and (SPED_NAMESPACE_MARKER in root_ns or has_inf_nfse):
        return Dialect.NFSE_NACIONAL_SPED
    if has_inf_nfse and (has_element(doc, "DPS") or has_element(doc, "infDPS")):
        # lists/competência wrappers without namespace
        return Dialect.NFSE_NACIONAL_SPED

    if root_name in MUNICIPAL_ROOTS or has_element(doc, "InfNfse") or has_inf_nfse:
        return Dialect.ABRASF

    return Dialect.NFE_TRADICIONAL


# ─────────────────────────── NFS-e São Paulo ───────────────────────────
def _extract_sao_paulo(doc: LET._ElementTree) -> _Extraction:
    base = find_first(doc, "NFe")
    if base is None:
        base = doc.getroot()

    def _sp_party(role: str) -> _Party:
        addr = find_first(base, f"Endereco{role}")
        return _Party(
            name=_first_text(base, f"RazaoSocial{role}", f"NomeFantasia{role}"),
            tax_id=(
                get_nested_text(base, f"CPFCNPJ{role}", "CNPJ")
                or get_nested_text(base, f"CPFCNPJ{role}", "CPF")
            ),
            city=_first_text(addr, "Cidade", "xMun"),
            state=get_text(addr, "UF"),
        )

    ext = _Extraction(
        issuer=_sp_party("Prestador"),
        recipient=_sp_party("Tomador"),
        raw_issue_date=_first_text(
            base, "DataEmissaoNFe", "DataEmissaoRPS", "DataEmissao"
        ),
        number=(
            get_nested_text(base, "ChaveNFe", "NumeroNFe")
            or _first_text(base, "NumeroNFe", "Numero")
        ),
        gross=parse_decimal(get_text(base, "ValorServicos")),
        iss_value=parse_decimal(get_text(base, "ValorISS")),
        iss_rate=parse_decimal(get_text(base, "AliquotaServicos")),
        withholding=Withholding(
            income_tax=parse_decimal(get_text(base, "ValorIR")),
            social_security_contribution=parse_decimal(get_text(base, "ValorINSS")),
            social_contribution_on_profit=parse_decimal(get_text(base, "ValorCSLL")),
            pis_contribution=parse_decimal(get_text(base, "ValorPIS")),
            cofins_contribution=parse_decimal(get_text(base, "ValorCOFINS")),
        ),
        iss_flag=_flag(
            get_text(base, "ISSRetido"), SP_ISS_WITHHELD, SP_ISS_NOT_WITHHELD
        ),
    )

    # SP não informa o valor líquido; é calculado
    net = ext.gross - ext.federal_total()
    if ext.iss_flag is IssFlag.WITHHELD:
        net -= ext.iss_value
    ext.net = net
    _t("SP ISSRetido=%s net=%s", ext.iss_flag.value, net)
    return ext


# ─────────────────────────── NFS-e Nacional ───────────────────────────
def _extract_sped(doc: LET._ElementTree) -> _Extraction:
    base = find_first(doc, "infNFSe")
    if base is None:
        base = doc.getroot()

    emit = _first_found(base, "emit", "prest")
    toma = find_first(base, "toma")
    if toma is None:
        dps_any = find_first(doc, "DPS")
        toma = find_first(dps_any if dps_any is not None else doc, "toma")

    dps = _first_found(base, "DPS", "infDPS")
    if dps is None:
        dps = _first_found(doc, "DPS", "infDPS")

    # infNFSe/valores first, DPS/valores second
    all_valores = find_all(base, "valores")
    main_valores = all_valores[0] if all_valores else None
    dps_valores = find_first(dps, "valores")
    containers = [main_valores]
    if dps_valores is not None and dps_valores is not main_valores:
        containers.append(dps_valores)

    trib_fed = find_first(dps, "tribFed")
    piscofins = find_first(trib_fed, "piscofins")
    withholding = Withholding(
        income_tax=get_first_non_zero(trib_fed, ["vRetIRRF", "vIRRF"]),
        social_security_contribution=get_first_non_zero(
            trib_fed, ["vRetINSS", "vINSS", "vRetCP"]
        ),
        social_contribution_on_profit=get_first_non_zero(
            trib_fed, ["vRetCSLL", "vCSLL"]
        ),
        pis_contribution=get_first_non_zero(piscofins, ["vPis"]),
        cofins_contribution=get_first_non_zero(piscofins, ["vCofins"]),
    )

    ext = _Extraction(
        issuer=_party(emit, address="enderEmit", id_container="IdentificacaoPrestador"),
        recipient=_party(toma, address="enderDest", id_container="IdentificacaoTomador"),
        raw_issue_date=(
            get_text(base, "dhProc")
            or get_nested_text(base, "infDPS", "dhEmi")
            or get_text(base, "dCompet")
        ),
        number=_first_text(base, "nNFSe", "nDFSe"),
        gross=get_first_non_zero_in(containers, ["vBC", "vServ"]),
        net=get_first_non_zero_in(containers, ["vLiq"]),
        iss_value=get_first_non_zero_in(containers, ["vISSQN"]),
        iss_rate=get_first_non_zero_in(containers, ["pAliqAplic", "pAliq"]),
        withholding=withholding,
        aggregate_withholding=get_first_non_zero(main_valores, ["vTotalRet"]),
    )

    # ISS: tribMun/tpRetISSQN
    scope = dps_valores if dps_valores is not None else dps
    trib = find_first(scope, "trib")
    trib_mun = find_first(trib if trib is not None else scope, "tribMun")
    if trib_mun is None:
        trib_mun = find_first(dps, "tribMun")
    if trib_mun is None:
        trib_mun = find_first(base, "tribMun")
    if trib_mun is not None:
        tp_ret = get_text(trib_mun, "tpRetISSQN")
        ext.iss_flag = _flag(tp_ret, SPED_ISS_WITHHELD, SPED_ISS_NOT_WITHHELD)
        _t(
            "SPED tribMun tribISSQN=%s tpRetISSQN=%s",
            get_text(trib_mun, "tribISSQN"),
            tp_ret,
        )
    else:
        _t("SPED tribMun not found")

    # totTrib as last resort for the federal total
    tot_trib = find_first(trib if trib is not None else scope, "totTrib")
    v_tot_trib = find_first(tot_trib, "vTotTrib")
    if v_tot_trib is not None:
        fed = parse_decimal(get_text(v_tot_trib, "vTotTribFed"))
        mun = parse_decimal(get_text(v_tot_trib, "vTotTribMun"))
        if not withholding.any() and ext.aggregate_withholding == 0 and fed > 0:
            ext.aggregate_withholding = fed
        if ext.iss_value == 0 and mun > 0:
            # ISS devido, não necessariamente retido; iss_value não é sobrescrito
            _t("SPED vTotTribMun=%s available, ISS value left at 0", mun)
    return ext


# ─────────────────────────── ABRASF ───────────────────────────
def _extract_abrasf(doc: LET._ElementTree) -> _Extraction:
    base = _first_found(doc, "InfNfse", "infNFSe", "NFSe")
    if base is None:
        base = doc.getroot()

    emit = _first_found(base, "PrestadorServico", "emit", "prest")
    dest = _first_found(base, "Tomador", "TomadorServico", "toma", "dest")
    issuer = _party(emit, address="enderEmit", id_container="IdentificacaoPrestador")
    if not issuer.tax_id:
        # GISS: InfDeclaracaoPrestacaoServico > Prestador > CpfCnpj > Cnpj
        inf_decl = find_first(base, "InfDeclaracaoPrestacaoServico")
        if inf_decl is None:
            inf_decl = find_first(doc, "InfDeclaracaoPrestacaoServico")
        issuer.tax_id = get_nested_text(
            find_first(inf_decl, "Prestador"), "CpfCnpj", "Cnpj"
        )

    valores_nfse = find_first(base, "ValoresNfse")
    servico = find_first(base, "Servico")
    valores_servico = find_first(servico, "Valores")
    valores = _first_found(base, "Valores", "valores")
    # Servico/Valores → ValoresNfse → generic Valores
    containers = [valores_servico, valores_nfse, valores]

    ext = _Extraction(
        issuer=issuer,
        recipient=_party(dest, address="enderDest", id_container="IdentificacaoTomador"),
        raw_issue_date=(
            get_text(base, "DataEmissao")
            or get_nested_text(base, "infDPS", "dhEmi")
            or _first_text(base, "dhEmi", "dhProc")
        ),
        number=_first_text(base, "Numero", "nNFSe", "nDFSe", "nDPS"),
        gross=get_first_non_zero_in(
            containers, ["ValorServicos", "BaseCalculo", "vBC", "vServ"]
        ),
        withholding=Withholding(
            income_tax=get_first_non_zero_in(
                containers,
                ["ValorIr", "Ir", "vIr", "vIRRF", "ValorIrrf", "vRetIRRF"],
            ),
            social_security_contribution=get_first_non_zero_in(
                containers, ["ValorInss", "Inss", "vInss", "vRetINSS", "ValorCp"]
            ),
            social_contribution_on_profit=get_first_non_zero_in(
                containers, ["ValorCsll", "Csll", "vCsll", "vRetCSLL"]
            ),
            pis_contribution=get_first_non_zero_in(
                containers, ["ValorPis", "Pis", "vPis", "vRetPIS"]
            ),
            cofins_contribution=get_first_non_zero_in(
                containers, ["ValorCofins", "Cofins", "vCofins", "vRetCOFINS"]
            ),
        ),
        aggregate_withholding=get_first_non_zero_in(
            containers, ["ValorTotalTributos", "TotalRetencoes", "vTotalRet"]
        ),
        other_retentions=get_first_non_zero_in(
            containers, ["OutrasRetencoes", "OutrasRet"]
        ),
    )

    ext.net = get_first_non_zero(
        valores_nfse, ["ValorLiquidoNfse", "ValorLiquido"]
    ) or get_first_non_zero_in(
        containers, ["ValorLiquidoNfse", "ValorLiquido", "vLiq"]
    )
    # Salvador uses ValorIssRetido instead of ValorIss
    ext.iss_value = get_first_non_zero(
        valores_nfse, ["ValorIss"]
    ) or get_first_non_zero_in(containers, ["ValorIss", "ValorIssRetido", "vISSQN"])
    ext.iss_rate = rate_percent(ext.iss_value, ext.gross)

    iss_retido = get_text(servico, "IssRetido") or get_text(base, "IssRetido")
    ext.iss_flag = _flag(iss_retido, ABRASF_ISS_WITHHELD, ABRASF_ISS_NOT_WITHHELD)
    _t("ABRASF IssRetido=%r", iss_retido)
    return ext


# ─────────────────────────── NF-e tradicional ───────────────────────────
def _extract_nfe(doc: LET._ElementTree) -> _Extraction:
    base = _first_found(doc, "infNFe", "NFe")
    if base is None:
        base = doc.getroot()

    gross = (
        parse_decimal(get_nested_text(base, "ICMSTot", "vNF"))
        or parse_decimal(get_nested_text(base, "ICMSTot", "vProd"))
        or parse_decimal(get_text(base, "vNF"))
    )
    iss_value = parse_decimal(
        get_nested_text(base, "ISSQNtot", "vISS")
    ) or parse_decimal(get_text(base, "vISS"))

    return _Extraction(
        issuer=_party(
            find_first(base, "emit"),
            address="enderEmit",
            id_container="IdentificacaoPrestador",
        ),
        recipient=_party(
            find_first(base, "dest"),
            address="enderDest",
            id_container="IdentificacaoTomador",
        ),
        raw_issue_date=(
            get_nested_text(base, "ide", "dhEmi")
            or get_nested_text(base, "ide", "dEmi")
            or get_text(base, "dhEmi")
        ),
        number=get_nested_text(base, "ide", "nNF") or get_text(base, "nNF"),
        gross=gross,
        # NF-e não tem valor líquido próprio
        net=gross,
        iss_value=iss_value,
        iss_rate=rate_percent(iss_value, gross),
        withholding=Withholding(
            income_tax=parse_decimal(get_text(base, "vIRRF")),
            social_security_contribution=parse_decimal(get_text(base, "vRetINSS")),
            social_contribution_on_profit=parse_decimal(get_text(base, "vRetCSLL")),
            pis_contribution=parse_decimal(get_text(base, "vRetPIS")),
            cofins_contribution=parse_decimal(get_text(base, "vRetCOFINS")),
        ),
    )


_EXTRACTORS: Dict[Dialect, Callable[[LET._ElementTree], _Extraction]] = {
    Dialect.NFSE_SAO_PAULO: _extract_sao_paulo,
    Dialect.NFSE_NACIONAL_SPED: _extract_sped,
    Dialect.ABRASF: _extract_abrasf,
    Dialect.NFE_TRADICIONAL: _extract_nfe,
}


def _build_fact(dialect: Dialect, ext: _Extraction) -> InvoiceFact:
    total_federal = ext.federal_total()
    net = ext.net if ext.net != 0 else ext.gross
    withheld, basis = infer_iss_retention(
        ext.gross, total_federal, ext.iss_value, net, ext.iss_flag
    )
    issue_date = normalize_date(ext.raw_issue_date)

    return InvoiceFact(
        dialect=dialect,
        issuer_name=ext.issuer.name,
        issuer_tax_id=only_digits(ext.issuer.tax_id),
        issuer_city=ext.issuer.city,
        issuer_state=ext.issuer.state,
        recipient_name=ext.recipient.name,
        recipient_tax_id=only_digits(ext.recipient.tax_id),
        recipient_city=ext.recipient.city,
        recipient_state=ext.recipient.state,
        issue_date=issue_date,
        expected_settlement_date=last_day_of_month(issue_date),
        document_number=ext.number,
        gross_value=ext.gross,
        net_value_as_declared=net,
        municipal_tax_value=ext.iss_value,
        municipal_tax_rate_percent=dec2(ext.iss_rate),
        withholding=ext.withholding,
        total_federal_withholding=total_federal,
        is_municipal_tax_withheld=withheld,
        iss_retention_basis=basis,
        has_any_withholding=total_federal > WITHHOLDING_THRESHOLD or withheld,
    )


def _xml_parser(encoding: Optional[str] = None) -> LET.XMLParser:
    # one parser per call; lxml parsers must not be shared between threads
    return LET.XMLParser(
        resolve_entities=False, no_network=True, encoding=encoding
    )


def load_xml(xml_text: str | bytes) -> LET._ElementTree:
    """Parse ``xml_text`` into an lxml tree or raise :class:`MalformedXml`.

    Text input is re-encoded as UTF-8 and any ``encoding=`` declaration in the
    prolog is overridden, since the text is already decoded.
    """
    try:
        if isinstance(xml_text, bytes):
            root = LET.fromstring(xml_text, parser=_xml_parser())
        else:
            root = LET.fromstring(
                (xml_text or "").encode("utf-8"), parser=_xml_parser("utf-8")
            )
    except (LET.XMLSyntaxError, ValueError) as exc:
        log.debug("XML parse error: %s", exc)
        raise MalformedXml() from exc
    if root is None:
        raise MalformedXml()
    return root.getroottree()


# ──────────────────── ponto de entrada ────────────────────
def parse_invoice_xml(xml_text: str | bytes) -> InvoiceFact:
    """Parse one invoice document and return its :class:`InvoiceFact`.

    Raises :class:`MalformedXml` for text that is not XML and
    :class:`UnrecognizedDocument` when issuer name, recipient name and
    document number are all missing.  Every other gap degrades to ``""`` or
    ``Decimal("0")``.
    """
    doc = load_xml(xml_text)
    dialect = detect_dialect(doc)
    ext = _EXTRACTORS[dialect](doc)
    fact = _build_fact(dialect, ext)

    log.debug("Parsed %s document: %s", dialect.value, fact.to_dict())
    if fact.iss_retention_basis is RetentionBasis.NEAREST:
        log.info(
            "ISS retention for document %s guessed from nearest net value "
            "(withheld=%s)",
            fact.document_number or "?",
            fact.is_municipal_tax_withheld,
        )

    if not (fact.issuer_name or fact.recipient_name or fact.document_number):
        raise UnrecognizedDocument()
    return fact


# ─────────────────── CNPJ do prestador: busca alternativa ───────────────────
_CNPJ_RE = re.compile(r"\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}|\d{14}")


def _cnpj14(value: str) -> str:
    digits = only_digits(value)
    return digits if len(digits) == 14 else ""


def _cnpj_from_block(el) -> str:
    if el is None:
        return ""
    candidates = (
        get_text(el, "CNPJ"),
        get_text(el, "Cnpj"),
        get_nested_text(el, "CpfCnpj", "Cnpj"),
        get_nested_text(el, "CpfCnpj", "CNPJ"),
        get_nested_text(el, "IdentificacaoPrestador", "Cnpj"),
        get_nested_text(el, "IdentificacaoPrestador", "CNPJ"),
    )
    for cand in candidates:
        cnpj = _cnpj14(cand)
        if cnpj:
            return cnpj
    return ""


def extract_issuer_tax_id_fallback(xml_text: str | bytes) -> str:
    """Best-effort CNPJ of the issuer for NFS-e/GISS documents.

    Used when :func:`parse_invoice_xml` returns an empty ``issuer_tax_id``.
    The recipient's CNPJ is never returned.  Returns ``""`` when nothing is
    found or the text is not XML.
    """
    try:
        doc = load_xml(xml_text)
    except MalformedXml:
        return ""

    recipient = _cnpj_from_block(
        _first_found(doc, "Tomador", "TomadorServico", "toma", "dest")
    )

    for name in ("emit", "prest", "PrestadorServico", "Prestador"):
        cnpj = _cnpj_from_block(find_first(doc, name))
        if cnpj and cnpj != recipient:
            return cnpj

    for el in doc.getroot().iter():
        if not isinstance(el.tag, str):
            continue
        if LET.QName(el).localname not in {"CNPJ", "Cnpj"}:
            continue
        cnpj = _cnpj14(el.text or "")
        if cnpj and cnpj != recipient:
            return cnpj

    raw = xml_text.decode("utf-8", "ignore") if isinstance(xml_text, bytes) else xml_text
    for match in _CNPJ_RE.findall(raw or ""):
        cnpj = _cnpj14(match)
        if cnpj and cnpj != recipient:
            return cnpj
    return ""
