from tcrit import models, parsers, processing
from tcrit.config import TcritConfig

__version__ = "0.1.0"

__all__ = ["TcritConfig", "__version__", "models", "parsers", "processing"]
