"""Keyword tokens and symbol tables used in ICS headers."""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterable, Iterator

HISTORY_KEYWORD = "history"


class Token(Enum):
    """Tokens for the keywords that may appear in an ICS header."""

    # Main categories
    SOURCE = auto()
    LAYOUT = auto()
    REPRES = auto()
    PARAM = auto()
    HISTORY = auto()
    SENSOR = auto()
    END = auto()
    # Sub categories
    FILE = auto()
    OFFSET = auto()
    PARAMS = auto()
    ORDER = auto()
    SIZES = auto()
    COORD = auto()
    SIGBIT = auto()
    FORMAT = auto()
    SIGN = auto()
    COMPR = auto()
    BYTEO = auto()
    ORIGIN = auto()
    SCALE = auto()
    UNITS = auto()
    LABELS = auto()
    SCILT = auto()
    TYPE = auto()
    MODEL = auto()
    SPARAMS = auto()
    SSTATES = auto()
    # Sub-sub categories (sensor parameters)
    CHANS = auto()
    DETECTORS = auto()
    IMDIR = auto()
    NUMAPER = auto()
    OBJQ = auto()
    REFRIME = auto()
    REFRILM = auto()
    PINHRAD = auto()
    ILLPINHRAD = auto()
    PINHSPA = auto()
    EXBFILL = auto()
    LAMBDEX = auto()
    LAMBDEM = auto()
    PHOTCNT = auto()
    IFACE1 = auto()
    IFACE2 = auto()
    DESCRIPTION = auto()
    DETMAG = auto()
    DETPPU = auto()
    DETBASELINE = auto()
    DETLNAVGCNT = auto()
    DETNOISEGAIN = auto()
    DETOFFSET = auto()
    DETSENS = auto()
    DETRADIUS = auto()
    DETSCALE = auto()
    DETSTRETCH = auto()
    DETROT = auto()
    DETMIRROR = auto()
    DETMODEL = auto()
    DETREDUCEHIST = auto()
    STEDDEPLMODE = auto()
    STEDLAMBDA = auto()
    STEDSATFACTOR = auto()
    STEDIMMFRACTION = auto()
    STEDVPPM = auto()
    SPIMEXCTYPE = auto()
    SPIMFILLFACTOR = auto()
    SPIMPLANENA = auto()
    SPIMPLANEGAUSSWIDTH = auto()
    SPIMPLANEPROPDIR = auto()
    SPIMPLANECENTEROFF = auto()
    SPIMPLANEFOCUSOF = auto()
    SCATTERMODEL = auto()
    SCATTERFREEPATH = auto()
    SCATTERRELCONTRIB = auto()
    SCATTERBLURRING = auto()
    # Values
    COMPR_UNCOMPRESSED = auto()
    COMPR_COMPRESS = auto()
    COMPR_GZIP = auto()
    FORMAT_INTEGER = auto()
    FORMAT_REAL = auto()
    FORMAT_COMPLEX = auto()
    SIGN_SIGNED = auto()
    SIGN_UNSIGNED = auto()
    STATE_DEFAULT = auto()
    STATE_ESTIMATED = auto()
    STATE_REPORTED = auto()
    STATE_VERIFIED = auto()


class SymbolTable:
    """An ordered mapping between header keywords and tokens.

    Several names may map to the same token; the first one listed is the
    name used when writing.
    """

    def __init__(self, entries: Iterable[tuple[str, Token]]) -> None:
        self._entries = tuple(entries)
        self._by_name: dict[str, Token] = {}
        self._by_token: dict[Token, str] = {}
        for name, token in self._entries:
            self._by_name.setdefault(name, token)
            self._by_token.setdefault(token, name)

    def lookup(self, name: str) -> Token | None:
        """Return the token for ``name`` (case-sensitive), or None if unknown."""
        return self._by_name.get(name)

    def name_of(self, token: Token) -> str:
        """Return the keyword written for ``token``; KeyError if not in this table."""
        try:
            return self._by_token[token]
        except KeyError:
            raise KeyError(f"{token!r} is not in this symbol table") from None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[str, Token]]:
        return iter(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


CATEGORIES = SymbolTable(
    [
        ("source", Token.SOURCE),
        ("layout", Token.LAYOUT),
        ("representation", Token.REPRES),
        ("parameter", Token.PARAM),
        (HISTORY_KEYWORD, Token.HISTORY),
        ("sensor", Token.SENSOR),
        ("end", Token.END),
    ]
)

SUB_CATEGORIES = SymbolTable(
    [
        ("file", Token.FILE),
        ("offset", Token.OFFSET),
        ("parameters", Token.PARAMS),
        ("order", Token.ORDER),
        ("sizes", Token.SIZES),
        ("coordinates", Token.COORD),
        ("significant_bits", Token.SIGBIT),
        ("format", Token.FORMAT),
        ("sign", Token.SIGN),
        ("compression", Token.COMPR),
        ("byte_order", Token.BYTEO),
        ("origin", Token.ORIGIN),
        ("scale", Token.SCALE),
        ("units", Token.UNITS),
        ("labels", Token.LABELS),
        ("SCIL_TYPE", Token.SCILT),
        ("type", Token.TYPE),
        ("model", Token.MODEL),
        ("s_params", Token.SPARAMS),
        ("s_states", Token.SSTATES),
    ]
)

SUB_SUB_CATEGORIES = SymbolTable(
    [
        ("Channels", Token.CHANS),
        ("Detectors", Token.DETECTORS),
        ("ImagingDirection", Token.IMDIR),
        ("NumAperture", Token.NUMAPER),
        ("ObjectiveQuality", Token.OBJQ),
        ("RefrInxMedium", Token.REFRIME),
        ("RefrInxLensMedium", Token.REFRILM),
        ("PinholeRadius", Token.PINHRAD),
        ("IllPinholeRadius", Token.ILLPINHRAD),
        ("PinholeSpacing", Token.PINHSPA),
        ("ExcitationBeamFill", Token.EXBFILL),
        ("LambdaEx", Token.LAMBDEX),
        ("LambdaEm", Token.LAMBDEM),
        ("ExPhotonCnt", Token.PHOTCNT),
        ("InterFacePrimary", Token.IFACE1),
        ("InterFaceSecondary", Token.IFACE2),
        ("Description", Token.DESCRIPTION),
        ("DetectorMagnif", Token.DETMAG),
        ("DetectorPPU", Token.DETPPU),
        ("DetectorBaseline", Token.DETBASELINE),
        ("DetectorLineAvgCnt", Token.DETLNAVGCNT),
        ("DetectorNoiseGain", Token.DETNOISEGAIN),
        ("DetectorOffset", Token.DETOFFSET),
        ("DetectorSensitivity", Token.DETSENS),
        ("DetectorRadius", Token.DETRADIUS),
        ("DetectorScale", Token.DETSCALE),
        ("DetectorStretch", Token.DETSTRETCH),
        ("DetectorRot", Token.DETROT),
        ("DetectorMirror", Token.DETMIRROR),
        ("DetectorModel", Token.DETMODEL),
        ("DetectorReduceHist", Token.DETREDUCEHIST),
        ("STEDDeplMode", Token.STEDDEPLMODE),
        ("STEDLambda", Token.STEDLAMBDA),
        ("STEDSatFactor", Token.STEDSATFACTOR),
        ("STEDImmFraction", Token.STEDIMMFRACTION),
        ("STEDVPPM", Token.STEDVPPM),
        ("SPIMExcType", Token.SPIMEXCTYPE),
        ("SPIMFillFactor", Token.SPIMFILLFACTOR),
        ("SPIMPlaneNA", Token.SPIMPLANENA),
        ("SPIMPlaneGaussWidth", Token.SPIMPLANEGAUSSWIDTH),
        ("SPIMPlanePropDir", Token.SPIMPLANEPROPDIR),
        ("SPIMPlaneCenterOff", Token.SPIMPLANECENTEROFF),
        ("SPIMPlaneFocusOff", Token.SPIMPLANEFOCUSOF),
        ("ScatterModel", Token.SCATTERMODEL),
        ("ScatterFreePath", Token.SCATTERFREEPATH),
        ("ScatterRelContrib", Token.SCATTERRELCONTRIB),
        ("ScatterBlurring", Token.SCATTERBLURRING),
    ]
)

VALUES = SymbolTable(
    [
        ("uncompressed", Token.COMPR_UNCOMPRESSED),
        ("compress", Token.COMPR_COMPRESS),
        ("gzip", Token.COMPR_GZIP),
        ("integer", Token.FORMAT_INTEGER),
        ("real", Token.FORMAT_REAL),
        ("float", Token.FORMAT_REAL),
        ("complex", Token.FORMAT_COMPLEX),
        ("signed", Token.SIGN_SIGNED),
        ("unsigned", Token.SIGN_UNSIGNED),
        ("default", Token.STATE_DEFAULT),
        ("estimated", Token.STATE_ESTIMATED),
        ("reported", Token.STATE_REPORTED),
        ("verified", Token.STATE_VERIFIED),
    ]
)