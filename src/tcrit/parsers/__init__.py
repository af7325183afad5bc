from tcrit.parsers.base_parser import BaseParser
from tcrit.parsers.fluorcam_parser import FluorCamParser
from tcrit.parsers.label_parser import WellLabelParser

__all__ = ["BaseParser", "FluorCamParser", "WellLabelParser"]
