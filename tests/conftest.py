import pytest


def build_sp_xml(iss_retido="true", valor_iss="50.00", extra=""):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<RetornoConsulta xmlns="http://www.prefeitura.sp.gov.br/nfe">'
        "  <Cabecalho Versao=\"1\"><Sucesso>true</Sucesso></Cabecalho>"
        '  <NFe xmlns="">'
        "    <ChaveNFe>"
        "      <InscricaoPrestador>12345678</InscricaoPrestador>"
        "      <NumeroNFe>4521</NumeroNFe>"
        "      <CodigoVerificacao>ABCD1234</CodigoVerificacao>"
        "    </ChaveNFe>"
        "    <DataEmissaoNFe>2026-01-14T10:35:08</DataEmissaoNFe>"
        "    <CPFCNPJPrestador><CNPJ>12.345.678/0001-90</CNPJ></CPFCNPJPrestador>"
        "    <RazaoSocialPrestador>CLINICA EXEMPLO LTDA</RazaoSocialPrestador>"
        "    <EnderecoPrestador><Cidade>3550308</Cidade><UF>SP</UF></EnderecoPrestador>"
        "    <CPFCNPJTomador><CNPJ>98765432000110</CNPJ></CPFCNPJTomador>"
        "    <RazaoSocialTomador>HOSPITAL CENTRAL SA</RazaoSocialTomador>"
        "    <EnderecoTomador><Cidade>3550308</Cidade><UF>SP</UF></EnderecoTomador>"
        "    <ValorServicos>1000.00</ValorServicos>"
        "    <ValorPIS>6.50</ValorPIS>"
        "    <ValorCOFINS>30.00</ValorCOFINS>"
        "    <AliquotaServicos>5.00</AliquotaServicos>"
        f"    <ValorISS>{valor_iss}</ValorISS>"
        + (f"    <ISSRetido>{iss_retido}</ISSRetido>" if iss_retido is not None else "")
        + extra
        + "  </NFe>"
        "</RetornoConsulta>"
    )


def build_sped_xml(
    tp_ret="2",
    v_liq="1837.00",
    trib_fed=(
        "<tribFed>"
        "  <piscofins><CST>01</CST><vPis>13.00</vPis><vCofins>60.00</vCofins></piscofins>"
        "  <vRetIRRF>30.00</vRetIRRF>"
        "  <vRetCSLL>20.00</vRetCSLL>"
        "</tribFed>"
    ),
    v_total_ret="",
    v_tot_trib_fed="0.00",
    namespace=True,
    wrapper=None,
    main_base=True,
):
    ns = ' xmlns="http://www.sped.fazenda.gov.br/nfse"' if namespace else ""
    trib_mun = (
        f"<tribMun><tribISSQN>1</tribISSQN><tpRetISSQN>{tp_ret}</tpRetISSQN></tribMun>"
        if tp_ret is not None
        else ""
    )
    total_ret = f"<vTotalRet>{v_total_ret}</vTotalRet>" if v_total_ret else ""
    base = "<vBC>2000.00</vBC><pAliqAplic>2.00</pAliqAplic>" if main_base else ""
    doc = (
        f'<NFSe{ns} versao="1.00">'
        '  <infNFSe Id="NFS29274082211222333000181000000000007726021234567890">'
        "    <xLocEmi>Salvador</xLocEmi>"
        "    <nNFSe>77</nNFSe>"
        "    <dhProc>2026-02-10T09:00:00-03:00</dhProc>"
        "    <nDFSe>123</nDFSe>"
        "    <emit>"
        "      <CNPJ>11222333000181</CNPJ>"
        "      <xNome>MEDICOS ASSOCIADOS LTDA</xNome>"
        "      <enderNac><xLgr>Rua das Flores</xLgr><cMun>2927408</cMun><UF>BA</UF></enderNac>"
        "    </emit>"
        "    <valores>"
        f"      {base}"
        "      <vISSQN>40.00</vISSQN>"
        f"      {total_ret}"
        f"      <vLiq>{v_liq}</vLiq>"
        "    </valores>"
        '    <DPS versao="1.00">'
        '      <infDPS Id="DPS292740821122233300018100001000000000000077">'
        "        <dhEmi>2026-02-09T08:00:00-03:00</dhEmi>"
        "        <prest><CNPJ>11222333000181</CNPJ></prest>"
        "        <toma>"
        "          <CNPJ>44.555.666/0001-99</CNPJ>"
        "          <xNome>HOSPITAL BOA SAUDE</xNome>"
        "          <end><endNac><cMun>2927408</cMun></endNac><UF>BA</UF></end>"
        "        </toma>"
        "        <valores>"
        "          <vServPrest><vServ>2000.00</vServ></vServPrest>"
        "          <trib>"
        f"            {trib_mun}"
        f"            {trib_fed}"
        "            <totTrib><vTotTrib>"
        f"              <vTotTribFed>{v_tot_trib_fed}</vTotTribFed>"
        "              <vTotTribEst>0.00</vTotTribEst>"
        "              <vTotTribMun>0.00</vTotTribMun>"
        "            </vTotTrib></totTrib>"
        "          </trib>"
        "        </valores>"
        "      </infDPS>"
        "    </DPS>"
        "  </infNFSe>"
        "</NFSe>"
    )
    if wrapper:
        doc = f"<{wrapper}>{doc}</{wrapper}>"
    return doc


def build_abrasf_xml(
    iss_retido="1",
    liquido="2665.50",
    servico_valores=(
        "<ValorServicos>3000.00</ValorServicos>"
        "<ValorPis>19.50</ValorPis>"
        "<ValorCofins>90.00</ValorCofins>"
        "<ValorIr>45.00</ValorIr>"
        "<ValorCsll>30.00</ValorCsll>"
        "<ValorIss>150.00</ValorIss>"
    ),
    prestador=(
        "<PrestadorServico>"
        "  <IdentificacaoPrestador><CpfCnpj><Cnpj>22.333.444/0001-55</Cnpj></CpfCnpj></IdentificacaoPrestador>"
        "  <RazaoSocial>ORTOPEDIA SUL LTDA</RazaoSocial>"
        "  <Endereco><Endereco>Rua A</Endereco><CodigoMunicipio>4314902</CodigoMunicipio><Uf>RS</Uf></Endereco>"
        "</PrestadorServico>"
    ),
    declaracao_prestador="",
    discriminacao="Honorarios medicos",
    valores_nfse=None,
):
    flag = f"<IssRetido>{iss_retido}</IssRetido>" if iss_retido is not None else ""
    liq = f"<ValorLiquidoNfse>{liquido}</ValorLiquidoNfse>" if liquido else ""
    if valores_nfse is None:
        valores_nfse = (
            "<BaseCalculo>3000.00</BaseCalculo>"
            "<Aliquota>5.00</Aliquota>"
            "<ValorIss>150.00</ValorIss>"
            f"{liq}"
        )
    return (
        '<CompNfse xmlns="http://www.abrasf.org.br/nfse.xsd">'
        '  <Nfse versao="2.02">'
        '    <InfNfse Id="nfse2024">'
        "      <Numero>2024</Numero>"
        "      <CodigoVerificacao>XPTO99</CodigoVerificacao>"
        "      <DataEmissao>05/03/2026 14:22:10</DataEmissao>"
        f"      <ValoresNfse>{valores_nfse}</ValoresNfse>"
        f"      {prestador}"
        "      <DeclaracaoPrestacaoServico>"
        "        <InfDeclaracaoPrestacaoServico>"
        f"          {declaracao_prestador}"
        "          <Servico>"
        f"            <Valores>{servico_valores}</Valores>"
        f"            {flag}"
        f"            <Discriminacao>{discriminacao}</Discriminacao>"
        "          </Servico>"
        "          <Tomador>"
        "            <IdentificacaoTomador><CpfCnpj><Cnpj>33444555000166</Cnpj></CpfCnpj></IdentificacaoTomador>"
        "            <RazaoSocial>HOSPITAL NORTE</RazaoSocial>"
        "          </Tomador>"
        "        </InfDeclaracaoPrestacaoServico>"
        "      </DeclaracaoPrestacaoServico>"
        "    </InfNfse>"
        "  </Nfse>"
        "</CompNfse>"
    )


def build_nfe_xml(total="<vProd>500.00</vProd><vNF>500.00</vNF>", extra=""):
    return (
        '<nfeProc xmlns="http://www.portalfiscal.inf.br/nfe" versao="4.00">'
        "  <NFe>"
        '    <infNFe Id="NFe41240255666777000188550010000098761000098761" versao="4.00">'
        "      <ide><nNF>9876</nNF><dhEmi>2024-02-10T08:15:00-03:00</dhEmi></ide>"
        "      <emit>"
        "        <CNPJ>55666777000188</CNPJ><xNome>FORNECEDOR SA</xNome>"
        "        <enderEmit><xMun>Curitiba</xMun><UF>PR</UF></enderEmit>"
        "      </emit>"
        "      <dest>"
        "        <CNPJ>99888777000166</CNPJ><xNome>CLINICA DESTINO</xNome>"
        "        <enderDest><xMun>Londrina</xMun><UF>PR</UF></enderDest>"
        "      </dest>"
        f"      <total><ICMSTot>{total}</ICMSTot>{extra}</total>"
        "    </infNFe>"
        "  </NFe>"
        "</nfeProc>"
    )


SGML_OFX = """OFXHEADER:100
DATA:OFXSGML
VERSION:102
ENCODING:USASCII
CHARSET:1252

<OFX>
<BANKMSGSRSV1>
<STMTTRNRS>
<STMTRS>
<CURDEF>BRL
<BANKACCTFROM>
<BANKID>341
<BRANCHID>1234
<ACCTID>56789-0
<ACCTTYPE>CHECKING
</BANKACCTFROM>
<BANKTRANLIST>
<DTSTART>20260101
<DTEND>20260131
<STMTTRN>
<TRNTYPE>DEBIT
<DTPOSTED>20260105
<TRNAMT>-1.234,56
<FITID>A2
<NAME>TARIFA
</STMTTRN>
<STMTTRN>
<TRNTYPE>CREDIT
<DTPOSTED>20260130120000[-03:EST]
<TRNAMT>913.50
<FITID>A1
<CHECKNUM>000123
<MEMO>TED HOSPITAL CENTRAL
</STMTTRN>
<STMTTRN>
<TRNTYPE>CREDIT
<DTPOSTED>20260110
<TRNAMT>10.00
</STMTTRN>
</BANKTRANLIST>
<LEDGERBAL>
<BALAMT>5000.00
<DTASOF>20260131
</LEDGERBAL>
</STMTRS>
</STMTTRNRS>
</BANKMSGSRSV1>
</OFX>
"""


@pytest.fixture
def sp_xml():
    return build_sp_xml


@pytest.fixture
def sped_xml():
    return build_sped_xml


@pytest.fixture
def abrasf_xml():
    return build_abrasf_xml


@pytest.fixture
def nfe_xml():
    return build_nfe_xml


@pytest.fixture
def sgml_ofx():
    return SGML_OFX
