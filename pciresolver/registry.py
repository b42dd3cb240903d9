# Lookup registry over a parsed PCI-ID catalog.
import logging
import threading

from .address import address_class,address_subsystem,pci_address
from .catalog import (device,device_class,device_progif,device_subclass,subsystem,vendor,
	summarize_programming_interfaces,summarize_subclasses,summarize_subsystems,summarize_vendor_devices)
from .config import config as default_config,resolver_config
from .parser import parse_bytes,parse_stream
from .sources import bytes_source,default_source

logger=logging.getLogger(__name__)

class pci_registry:
	"""
	Holds the vendor and class forests of one pci.ids and answers lookups on them.

	The catalog is parsed on first use. reload() parses again and swaps the whole
	catalog at once, so a lookup sees either the old or the new one. Lookups
	return the first matching entry in file order, or None.
	"""

	def __init__(self,source=None,config:resolver_config|None=None):
		if isinstance(source,(bytes,bytearray)):
			source=bytes_source(source)
		self._source=source
		self._config:resolver_config=config or default_config
		self._lock=threading.Lock()
		self._catalog:dict|None=None

	# Loading.

	@property
	def is_loaded(self)->bool:
		return self._catalog is not None

	def _read_source(self,source)->dict:
		if source is None:
			source=default_source(self._config)
		stream=source()
		if isinstance(stream,(bytes,bytearray)):
			return parse_bytes(bytes(stream),self._config.encoding)
		if not hasattr(stream,"__exit__"):
			return parse_stream(stream,self._config.encoding)
		with stream:
			return parse_stream(stream,self._config.encoding)

	def _load(self,source):
		# Caller holds self._lock. Nothing is replaced unless the parse succeeds.
		catalog=self._read_source(source)
		self._source=source
		self._catalog=catalog
		logger.info("PCI-ID catalog loaded: %d vendors, %d classes",len(catalog["vendors"]),len(catalog["classes"]))

	def _snapshot(self)->dict:
		catalog=self._catalog
		if catalog is None:
			with self._lock:
				if self._catalog is None:
					self._load(self._source)
				catalog=self._catalog
		return catalog

	def reload(self,source=None):
		"""Parse the database again, optionally from a new source. A failed reload keeps the current catalog and source."""
		if isinstance(source,(bytes,bytearray)):
			source=bytes_source(source)
		with self._lock:
			self._load(source if source is not None else self._source)

	@property
	def vendors(self)->tuple[vendor,...]:
		return self._snapshot()["vendors"]

	@property
	def classes(self)->tuple[device_class,...]:
		return self._snapshot()["classes"]

	@property
	def version(self)->str:
		return self._snapshot()["version"]

	@property
	def date(self)->str:
		return self._snapshot()["date"]

	# Vendors and devices.

	def get_vendor(self,vendor_id:int)->vendor|None:
		for v in self._snapshot()["vendors"]:
			if v.id==vendor_id:
				return v
		return None

	def get_vendor_by_address(self,address:pci_address)->vendor|None:
		return self.get_vendor(address.vendor_id)

	def get_vendor_by_subsystem(self,sub:address_subsystem|subsystem)->vendor|None:
		return self.get_vendor(sub.vendor_id)

	def get_device(self,vendor_id:int,device_id:int)->device|None:
		v=self.get_vendor(vendor_id)
		if v is None:
			return None
		for d in v.device_list:
			if d.id==device_id:
				return d
		return None

	def get_device_by_address(self,address:pci_address)->device|None:
		return self.get_device(address.vendor_id,address.device_id)

	def get_device_by_subsystem(self,sub:address_subsystem|subsystem)->device|None:
		# The subsystem's own vendor and device, not the device it is listed under.
		return self.get_device(sub.vendor_id,sub.device_id)

	def get_subsystem(self,vendor_id:int,device_id:int,sub_vendor_id:int,sub_device_id:int)->subsystem|None:
		d=self.get_device(vendor_id,device_id)
		if d is None:
			return None
		for s in d.subsystem_list:
			if s.vendor_id==sub_vendor_id and s.device_id==sub_device_id:
				return s
		return None

	def get_subsystem_by_address(self,address:pci_address)->subsystem|None:
		if address.subsystem is None:
			raise ValueError("Address {} has no subsystem".format(address))
		return self.get_subsystem(address.vendor_id,address.device_id,address.subsystem.vendor_id,address.subsystem.device_id)

	def describe_subsystem(self,sub:subsystem)->str:
		# Both names come from the same catalog even if a reload runs meanwhile.
		own_parts:list[str]=[]
		v=next((x for x in self._snapshot()["vendors"] if x.id==sub.vendor_id),None)
		if v is not None:
			own_parts.append(v.name)
			d=next((x for x in v.device_list if x.id==sub.device_id),None)
			if d is not None:
				own_parts.append(d.name)
		return "{} {}".format(" ".join(own_parts),sub).strip()

	# Classes.

	def get_base_class(self,class_id:int)->device_class|None:
		for c in self._snapshot()["classes"]:
			if c.id==class_id:
				return c
		return None

	def get_base_class_by_class(self,cls:address_class)->device_class|None:
		return self.get_base_class(cls.base_class_id)

	def get_subclass(self,class_id:int,subclass_id:int)->device_subclass|None:
		c=self.get_base_class(class_id)
		if c is None:
			return None
		for s in c.subclass_list:
			if s.id==subclass_id:
				return s
		return None

	def get_subclass_by_class(self,cls:address_class)->device_subclass|None:
		return self.get_subclass(cls.base_class_id,cls.subclass_id)

	def get_progif(self,class_id:int,subclass_id:int,progif_id:int)->device_progif|None:
		s=self.get_subclass(class_id,subclass_id)
		if s is None:
			return None
		for p in s.progif_list:
			if p.id==progif_id:
				return p
		return None

	def get_progif_by_class(self,cls:address_class)->device_progif|None:
		if cls.progif_id is None:
			return None
		return self.get_progif(cls.base_class_id,cls.subclass_id,cls.progif_id)

	def stats(self)->dict:
		catalog=self._snapshot()
		vendor_list=catalog["vendors"]
		class_list=catalog["classes"]
		return {
			"vendors":len(vendor_list),
			"devices":len(summarize_vendor_devices(vendor_list)),
			"subsystems":len(summarize_subsystems(vendor_list)),
			"classes":len(class_list),
			"subclasses":len(summarize_subclasses(class_list)),
			"progifs":len(summarize_programming_interfaces(class_list)),
			"version":catalog["version"],
			"date":catalog["date"],
		}

_default_registry:pci_registry|None=None
_default_lock=threading.Lock()

def default_registry()->pci_registry:
	"""Process-wide registry over the default database source, created on first call."""
	global _default_registry
	if _default_registry is None:
		with _default_lock:
			if _default_registry is None:
				_default_registry=pci_registry()
	return _default_registry
