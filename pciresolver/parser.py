# Parser for the pci.ids text format.
#
#   # comment
#   vendor  vendor_name
#   	device  device_name
#   		subvendor subdevice  subsystem_name
#   C class  class_name
#   	subclass  subclass_name
#   		progif  progif_name
import io
import logging
import re
import time

from .catalog import device,device_class,device_progif,device_subclass,subsystem,vendor
from .errors import database_load_error

logger=logging.getLogger(__name__)

_name_separator=re.compile(r" {2,}")
_hex_digits=re.compile(r"[0-9A-Fa-f]+")

def _parse_hex(token:str,bits:int)->int|None:
	if not _hex_digits.fullmatch(token):
		return None
	value=int(token,16)
	if value>>bits:
		return None
	return value

def _split_entry(text:str,bits:int)->tuple[int,str]|None:
	# "<hex id>  <name>"; the name may itself contain double spaces.
	tmp=[x for x in _name_separator.split(text.strip()) if x]
	if len(tmp)<2:
		return None
	entry_id=_parse_hex(tmp[0],bits)
	if entry_id is None:
		return None
	return entry_id," ".join(tmp[1:])

def decode_vendor(text:str)->vendor|None:
	r=_split_entry(text,16)
	if r is None:
		return None
	return vendor(r[0],r[1])

def decode_device(parent:vendor,text:str)->device|None:
	r=_split_entry(text,16)
	if r is None:
		return None
	return device(parent,r[0],r[1])

def decode_subsystem(parent:device,text:str)->subsystem|None:
	tmp=[x for x in _name_separator.split(text.strip()) if x]
	if len(tmp)<2:
		return None
	tmp2=tmp[0].split(' ')
	if len(tmp2)!=2:
		return None
	vendor_id=_parse_hex(tmp2[0],16)
	device_id=_parse_hex(tmp2[1],16)
	if vendor_id is None or device_id is None:
		return None
	return subsystem(parent,vendor_id,device_id," ".join(tmp[1:]))

def decode_class(text:str)->device_class|None:
	r=_split_entry(text,8)
	if r is None:
		return None
	return device_class(r[0],r[1])

def decode_subclass(parent:device_class,text:str)->device_subclass|None:
	r=_split_entry(text,8)
	if r is None:
		return None
	return device_subclass(parent,r[0],r[1])

def decode_progif(parent:device_subclass,text:str)->device_progif|None:
	r=_split_entry(text,8)
	if r is None:
		return None
	return device_progif(parent,r[0],r[1])

def _leading_tabs(l:str)->int:
	n=0
	while n<len(l) and l[n]=='\t':
		n+=1
	return n

def parse_lines(lines)->dict:
	"""
	Build the vendor and class forests from pci.ids lines.

	Malformed lines are dropped and reset the context they would have opened,
	so nothing after them gets attached to the wrong parent.

	Returns a dict with "vendors" and "classes" (tuples in file order) and the
	"version" and "date" strings from the file header.
	"""
	ret_dict:dict={"vendors":[],"classes":[],"version":"","date":""}
	current_vendor:vendor|None=None
	current_device:device|None=None
	current_class:device_class|None=None
	current_subclass:device_subclass|None=None
	dropped=0
	for n,l in enumerate(lines,1):
		l=l.rstrip('\r\n')
		if not l.strip():
			continue
		if l[0]=='#':
			x=l[1:].strip()
			if x.startswith("Version:"):
				ret_dict["version"]=x[8:].strip()
			elif x.startswith("Date:"):
				ret_dict["date"]=x[5:].strip()
			continue
		if l.startswith("C "):
			# Class section, vendors never interleave with it.
			current_vendor=None
			current_device=None
			current_subclass=None
			current_class=decode_class(l[2:])
			if current_class is None:
				logger.debug("Dropped class line %d: %r",n,l)
				dropped+=1
			else:
				ret_dict["classes"].append(current_class)
			continue
		tabs=_leading_tabs(l)
		if tabs==0:
			current_class=None
			current_subclass=None
			current_device=None
			current_vendor=decode_vendor(l)
			if current_vendor is None:
				logger.debug("Dropped vendor line %d: %r",n,l)
				dropped+=1
			else:
				ret_dict["vendors"].append(current_vendor)
		elif tabs==1:
			if current_vendor is not None:
				current_device=decode_device(current_vendor,l)
				if current_device is None:
					current_vendor=None
					logger.debug("Dropped device line %d: %r",n,l)
					dropped+=1
				else:
					current_vendor.add_device(current_device)
			elif current_class is not None:
				current_subclass=decode_subclass(current_class,l)
				if current_subclass is None:
					current_class=None
					logger.debug("Dropped subclass line %d: %r",n,l)
					dropped+=1
				else:
					current_class.add_subclass(current_subclass)
			else:
				logger.debug("Dropped orphan line %d: %r",n,l)
				dropped+=1
		else:
			if current_device is not None:
				s=decode_subsystem(current_device,l)
				if s is None:
					logger.debug("Dropped subsystem line %d: %r",n,l)
					dropped+=1
				else:
					current_device.add_subsystem(s)
			elif current_subclass is not None:
				p=decode_progif(current_subclass,l)
				if p is None:
					logger.debug("Dropped programming interface line %d: %r",n,l)
					dropped+=1
				else:
					current_subclass.add_progif(p)
			else:
				logger.debug("Dropped orphan line %d: %r",n,l)
				dropped+=1
	if dropped:
		logger.debug("%d malformed or orphan lines dropped",dropped)
	ret_dict["vendors"]=tuple(ret_dict["vendors"])
	ret_dict["classes"]=tuple(ret_dict["classes"])
	return ret_dict

def parse_stream(stream,encoding:str="utf-8")->dict:
	"""Parse a binary pci.ids stream. Raises database_load_error if it cannot be read."""
	t1=time.time()
	try:
		data=stream.read()
		if isinstance(data,str):
			lines=data.split('\n')
		else:
			lines=data.decode(encoding,errors="replace").split('\n')
	except (OSError,ValueError,LookupError) as e:
		raise database_load_error("Cannot read PCI-ID database: {}".format(e)) from e
	r=parse_lines(lines)
	t2=time.time()
	logger.info("Parsed %d vendors and %d classes (version %s) in %.3f seconds",len(r["vendors"]),len(r["classes"]),r["version"] or "unknown",t2-t1)
	return r

def parse_bytes(data:bytes,encoding:str="utf-8")->dict:
	return parse_stream(io.BytesIO(data),encoding)
