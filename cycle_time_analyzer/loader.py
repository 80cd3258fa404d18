import logging
import unicodedata
from typing import Any, Dict, List, Optional

import pandas as pd
from pandas import DataFrame

logger = logging.getLogger(__name__)

ENCODINGS = ['utf-8', 'latin1', 'iso-8859-1']


def load_frame(source) -> Optional[DataFrame]:
    """Reads a CSV export with a header row. Cells are kept as raw strings."""
    for encoding in ENCODINGS:
        try:
            if hasattr(source, 'seek'): source.seek(0)
            df = pd.read_csv(source, keep_default_na=False, dtype=str, encoding=encoding, skipinitialspace=True)
        except UnicodeDecodeError:
            continue
        except (pd.errors.ParserError, pd.errors.EmptyDataError, OSError) as e:
            logger.error("Error loading data with encoding %s: %s", encoding, e)
            return None
        df.columns = [unicodedata.normalize('NFKC', col).strip() if isinstance(col, str) else col for col in df.columns]
        df = df[~df.apply(lambda row: all(str(v).strip() == '' for v in row), axis=1)] if not df.empty else df
        logger.info("Loaded %d rows x %d columns (%s)", len(df), len(df.columns), encoding)
        return df.reset_index(drop=True)
    logger.error("Could not decode the file with any of %s", ENCODINGS)
    return None


def load_rows(source) -> Optional[List[Dict[str, Any]]]:
    df = load_frame(source)
    return None if df is None else df.to_dict('records')
