# Configuration for locating and reading the PCI-ID database.
import os
from dataclasses import dataclass,field

DEFAULT_DATABASE_URL:str="https://pci-ids.ucw.cz/v2.2/pci.ids"

# Where distributions install pci.ids (hwdata, pciutils).
DEFAULT_SEARCH_PATHS:list[str]=[
	"/usr/share/hwdata/pci.ids",
	"/usr/share/misc/pci.ids",
	"/usr/share/pci.ids",
	"/var/lib/pciutils/pci.ids",
	"/usr/local/share/pci.ids",
]

def _env_flag(name:str,default:bool=False)->bool:
	value=os.getenv(name)
	if value is None:
		return default
	return value.strip().lower() in ("1","true","yes","on")

def _env_float(name:str,default:float)->float:
	value=os.getenv(name)
	if not value:
		return default
	try:
		return float(value)
	except ValueError:
		return default

@dataclass
class resolver_config:
	"""pciresolver settings, defaults taken from the environment."""

	# Explicit pci.ids location, tried before the search paths.
	database_path:str|None=field(default_factory=lambda:os.getenv("PCI_IDS_PATH"))
	search_paths:list[str]=field(default_factory=lambda:list(DEFAULT_SEARCH_PATHS))

	# Upstream copy, only fetched when allowed.
	database_url:str=field(default_factory=lambda:os.getenv("PCI_IDS_URL",DEFAULT_DATABASE_URL))
	allow_download:bool=field(default_factory=lambda:_env_flag("PCI_IDS_ALLOW_DOWNLOAD"))
	download_timeout:float=field(default_factory=lambda:_env_float("PCI_IDS_TIMEOUT",30.0))

	encoding:str=field(default_factory=lambda:os.getenv("PCI_IDS_ENCODING","utf-8"))

config=resolver_config()
