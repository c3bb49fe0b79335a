from pathlib import Path
import pytest

@pytest.fixture(scope="session")
def project_root() -> Path:
    return Path(__file__).resolve().parents[1]

@pytest.fixture(scope="session")
def cfg_path(project_root: Path) -> Path:
    # default location we agreed on
    return project_root / "config" / "config.toml"

@pytest.fixture(scope="session")
def cfg(cfg_path: Path):
    from purifier.config_model.model import load_config
    return load_config(cfg_path)

@pytest.fixture
def lenient_cfg(cfg):
    return cfg.model_copy(update={"sanitizer": cfg.sanitizer.model_copy(update={"strict": False})})

@pytest.fixture
def blog_rules():
    # posts -> tags, two levels of list-of-records
    return {
        "title": "string:trim|escape;max:120",
        "posts": {
            "type": "array",
            "data": {
                "title": "string:trim;required",
                "tags": {
                    "type": "array",
                    "data": {"name": "string:trim|lower;min:2;required"},
                },
            },
        },
    }
