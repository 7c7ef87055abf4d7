"""Confucius core - the configuration resolution engine.

## Key Modules

### Configuration (`confucius.core.config`)
- `Resolver`: merges sources, substitutes placeholders, converts values
- Sources: `EnvSource`, `MapSource`, `PropertiesFileSource`, `DotenvFileSource`, `YamlFileSource`

### Version (`confucius.core.version`)
- `PACKAGE_NAME`, `PACKAGE_VERSION`, `get_package_info()`
"""

from .version import PACKAGE_NAME, PACKAGE_VERSION, get_package_info

__all__ = ["PACKAGE_NAME", "PACKAGE_VERSION", "get_package_info"]
