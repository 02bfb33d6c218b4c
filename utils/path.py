# utils/path.py
from pathlib import Path

# Folders that must exist in your project root
_REQUIRED_DIRS = ("tabular_knn", "utils")

def project_root(start: Path | None = None) -> Path:
    here = (start or Path(__file__)).resolve()
    # search current dir and all parents
    for base in [here.parent, *here.parents]:
        if all((base / d).exists() for d in _REQUIRED_DIRS):
            return base
    # Fallback: directory containing this file
    return here.parent

def data_dirs(root: Path | None = None):
    base = (root or project_root()) / "clean_data"
    return (base / "artifacts", base / "data", base / "splitted_data")

def model_artifact(model_name: str, root: Path | None = None) -> Path:
    art, _, _ = data_dirs(root)
    return art / f"{model_name}.joblib"

def train_config_path(model_name: str, root: Path | None = None) -> Path:
    art, _, _ = data_dirs(root)
    return art / f"{model_name}.train_config.json"

def split_config_path(root: Path | None = None) -> Path:
    art, _, _ = data_dirs(root)
    return art / "split_config.json"

def split_csv_paths(root: Path | None = None):
    _, _, splits = data_dirs(root)
    return (splits / "train_split.csv", splits / "test_split.csv")
