# Resolve PCI vendor, device, subsystem and class codes against pci.ids,
# and parse/format PCI hardware-ID strings.
from .address import address_class,address_subsystem,format_address,parse_address,pci_address,try_parse_address
from .catalog import device,device_class,device_progif,device_subclass,subsystem,vendor
from .config import config,resolver_config
from .errors import address_format_error,database_load_error,pciresolver_error
from .parser import parse_bytes,parse_lines,parse_stream
from .registry import default_registry,pci_registry
from .sources import bytes_source,default_source,download_database,file_source,find_database_path,url_source

__all__=[
	"address_class","address_subsystem","format_address","parse_address","pci_address","try_parse_address",
	"device","device_class","device_progif","device_subclass","subsystem","vendor",
	"config","resolver_config",
	"address_format_error","database_load_error","pciresolver_error",
	"parse_bytes","parse_lines","parse_stream",
	"default_registry","pci_registry",
	"bytes_source","default_source","download_database","file_source","find_database_path","url_source",
]
