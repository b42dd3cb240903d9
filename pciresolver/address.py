# Hardware-ID address strings, e.g. PCI\VEN_10DE&DEV_1180&SUBSYS_04321043&REV_A1
import logging
import re
from dataclasses import dataclass

from .errors import address_format_error

logger=logging.getLogger(__name__)

ENUMERATOR:str="PCI"
VENDOR_IDENTIFIER:str="VEN_"
DEVICE_IDENTIFIER:str="DEV_"
SUBSYSTEM_IDENTIFIER:str="SUBSYS_"
CLASS_IDENTIFIER:str="CC_"
REVISION_IDENTIFIER:str="REV_"
DEVICE_TYPE_IDENTIFIER:str="DT_"

_delimiters=re.compile(r"[&\\/]")
_hex_digits=re.compile(r"[0-9A-F]+")

def _check_range(name:str,value,bits:int):
	if isinstance(value,bool) or not isinstance(value,int) or value<0 or value>>bits:
		raise ValueError("{} must be a {}-bit unsigned integer, got {!r}".format(name,bits,value))

@dataclass(frozen=True)
class address_subsystem:
	vendor_id:int
	device_id:int

	def __post_init__(self):
		_check_range("vendor_id",self.vendor_id,16)
		_check_range("device_id",self.device_id,16)

	def __str__(self):
		# Device first, then vendor.
		return "{}{:04X}{:04X}".format(SUBSYSTEM_IDENTIFIER,self.device_id,self.vendor_id)

@dataclass(frozen=True)
class address_class:
	base_class_id:int
	subclass_id:int
	progif_id:int|None=None

	def __post_init__(self):
		_check_range("base_class_id",self.base_class_id,8)
		_check_range("subclass_id",self.subclass_id,8)
		if self.progif_id is not None:
			_check_range("progif_id",self.progif_id,8)

	def __str__(self):
		if self.progif_id is not None:
			return "{}{:02X}{:02X}{:02X}".format(CLASS_IDENTIFIER,self.base_class_id,self.subclass_id,self.progif_id)
		return "{}{:02X}{:02X}".format(CLASS_IDENTIFIER,self.base_class_id,self.subclass_id)

@dataclass(frozen=True)
class pci_address:
	vendor_id:int
	device_id:int
	subsystem:address_subsystem|None=None
	device_class:address_class|None=None
	revision:int|None=None
	device_type:int|None=None

	def __post_init__(self):
		_check_range("vendor_id",self.vendor_id,16)
		_check_range("device_id",self.device_id,16)
		if self.revision is not None:
			_check_range("revision",self.revision,8)
		if self.device_type is not None:
			_check_range("device_type",self.device_type,16)

	@classmethod
	def parse(cls,text:str)->"pci_address":
		return parse_address(text)

	@classmethod
	def try_parse(cls,text:str)->"pci_address|None":
		return try_parse_address(text)

	def __str__(self):
		return format_address(self)

def _segment_value(part:str,prefix:str,digits:int)->int|None:
	value=part[len(prefix):]
	if len(value)!=digits or not _hex_digits.fullmatch(value):
		logger.debug("Ignoring malformed address segment %r",part)
		return None
	return int(value,16)

def _segment_class(part:str)->address_class|None:
	value=part[len(CLASS_IDENTIFIER):]
	if len(value) not in (4,6) or not _hex_digits.fullmatch(value):
		logger.debug("Ignoring malformed address segment %r",part)
		return None
	base_class_id=int(value[0:2],16)
	subclass_id=int(value[2:4],16)
	if len(value)==6:
		return address_class(base_class_id,subclass_id,int(value[4:6],16))
	return address_class(base_class_id,subclass_id)

def parse_address(text:str)->pci_address:
	"""
	Parse a hardware-ID string into a pci_address.

	Segments may come in any order and are matched case-insensitively by prefix.
	Unknown or malformed segments are ignored, and a repeated segment overrides
	the earlier one. Raises address_format_error if no valid VEN_ or DEV_
	segment is present.
	"""
	if not isinstance(text,str):
		raise address_format_error(text,"Address must be a string")
	vendor_id:int|None=None
	device_id:int|None=None
	sub:address_subsystem|None=None
	cls:address_class|None=None
	revision:int|None=None
	device_type:int|None=None
	for part in _delimiters.split(text.upper()):
		if not part:
			continue
		if part.startswith(VENDOR_IDENTIFIER):
			value=_segment_value(part,VENDOR_IDENTIFIER,4)
			if value is not None:
				vendor_id=value
		elif part.startswith(DEVICE_IDENTIFIER):
			value=_segment_value(part,DEVICE_IDENTIFIER,4)
			if value is not None:
				device_id=value
		elif part.startswith(SUBSYSTEM_IDENTIFIER):
			value=_segment_value(part,SUBSYSTEM_IDENTIFIER,8)
			if value is not None:
				sub=address_subsystem(value&0xFFFF,value>>16)
		elif part.startswith(CLASS_IDENTIFIER):
			c=_segment_class(part)
			if c is not None:
				cls=c
		elif part.startswith(REVISION_IDENTIFIER):
			value=_segment_value(part,REVISION_IDENTIFIER,2)
			if value is not None:
				revision=value
		elif part.startswith(DEVICE_TYPE_IDENTIFIER):
			value=_segment_value(part,DEVICE_TYPE_IDENTIFIER,4)
			if value is not None:
				device_type=value
	if vendor_id is None or device_id is None:
		raise address_format_error(text)
	return pci_address(vendor_id,device_id,sub,cls,revision,device_type)

def try_parse_address(text:str)->pci_address|None:
	try:
		return parse_address(text)
	except address_format_error:
		return None

def format_address(address:pci_address)->str:
	# Zero vendor and device ids are not written out.
	parts:list[str]=[]
	if address.vendor_id>0:
		parts.append("{}{:04X}".format(VENDOR_IDENTIFIER,address.vendor_id))
	if address.device_id>0:
		parts.append("{}{:04X}".format(DEVICE_IDENTIFIER,address.device_id))
	if address.subsystem is not None:
		parts.append(str(address.subsystem))
	if address.device_class is not None:
		parts.append(str(address.device_class))
	if address.device_type is not None:
		parts.append("{}{:04X}".format(DEVICE_TYPE_IDENTIFIER,address.device_type))
	if address.revision is not None:
		parts.append("{}{:02X}".format(REVISION_IDENTIFIER,address.revision))
	return ENUMERATOR+"\\"+"&".join(parts)
