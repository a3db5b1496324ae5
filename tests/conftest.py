import sys
from pathlib import Path

# A valuta/ modulok közvetlenül importálhatók (ahogy `streamlit run` is látja őket)
sys.path.insert(0, str(Path(__file__).parent.parent / "valuta"))
