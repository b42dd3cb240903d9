# PCI-ID catalog entities.
# Vendors own devices, devices own subsystems; classes own subclasses, subclasses own programming interfaces.
# Children are appended by the parser only. Every child keeps a plain reference to its parent.

class device_progif:
	def __init__(self,parent,progif_id:int,progif_name:str):
		self.id:int=progif_id
		self.name:str=progif_name
		self.parent:device_subclass|None=parent

	@property
	def base_class(self):
		return self.parent.parent if self.parent is not None else None

	@property
	def code(self)->int:
		s=self.parent
		c=self.base_class
		return ((c.id if c is not None else 0)<<16)|((s.id if s is not None else 0)<<8)|self.id

	def __eq__(self,other):
		if not isinstance(other,device_progif):
			return NotImplemented
		return self.id==other.id and self.parent==other.parent

	def __hash__(self):
		return hash((self.id,self.parent))

	def __str__(self):
		s=self.parent
		c=self.base_class
		if s is not None and c is not None:
			return "{} {} {} ({:02X}{:02X}{:02X})".format(c.name,s.name,self.name,c.id,s.id,self.id)
		if s is not None:
			return "{} {} ({:02X}{:02X})".format(s.name,self.name,s.id,self.id)
		return "{} ({:02X})".format(self.name,self.id)

	def __repr__(self):
		return "device_progif(0x{:02x}, {!r})".format(self.id,self.name)

class device_subclass:
	def __init__(self,parent,subclass_id:int,subclass_name:str):
		self.id:int=subclass_id
		self.name:str=subclass_name
		self.parent:device_class|None=parent
		self.progif_list:list[device_progif]=[]

	@property
	def progifs(self)->tuple[device_progif,...]:
		return tuple(self.progif_list)

	@property
	def code(self)->int:
		return ((self.parent.id if self.parent is not None else 0)<<8)|self.id

	def add_progif(self,progif:device_progif):
		self.progif_list.append(progif)

	def __eq__(self,other):
		if not isinstance(other,device_subclass):
			return NotImplemented
		return self.parent==other.parent and self.id==other.id

	def __hash__(self):
		return hash((self.parent,self.id))

	def __str__(self):
		c=self.parent
		if c is not None:
			return "{} {} ({:02X}{:02X})".format(c.name,self.name,c.id,self.id)
		return "{} ({:02X})".format(self.name,self.id)

	def __repr__(self):
		return "device_subclass(0x{:02x}, {!r})".format(self.id,self.name)

class device_class:
	def __init__(self,class_id:int,class_name:str):
		self.id:int=class_id
		self.name:str=class_name
		self.subclass_list:list[device_subclass]=[]

	@property
	def subclasses(self)->tuple[device_subclass,...]:
		return tuple(self.subclass_list)

	def add_subclass(self,subclass:device_subclass):
		self.subclass_list.append(subclass)

	def __eq__(self,other):
		if not isinstance(other,device_class):
			return NotImplemented
		return self.id==other.id

	def __hash__(self):
		return hash(self.id)

	def __str__(self):
		return "{} ({:02X})".format(self.name,self.id)

	def __repr__(self):
		return "device_class(0x{:02x}, {!r})".format(self.id,self.name)

class subsystem:
	# vendor_id/device_id name the subsystem's own vendor and device, not the parent device.
	def __init__(self,parent,vendor_id:int,device_id:int,device_name:str):
		self.vendor_id:int=vendor_id
		self.device_id:int=device_id
		self.name:str=device_name
		self.parent:device|None=parent

	@property
	def parent_vendor(self):
		return self.parent.parent if self.parent is not None else None

	@property
	def code(self)->int:
		d=self.parent
		v=self.parent_vendor
		return ((v.id if v is not None else 0)<<48)|((d.id if d is not None else 0)<<32)|(self.vendor_id<<16)|self.device_id

	def __eq__(self,other):
		if not isinstance(other,subsystem):
			return NotImplemented
		return self.device_id==other.device_id and self.parent==other.parent and self.vendor_id==other.vendor_id

	def __hash__(self):
		return hash((self.device_id,self.parent,self.vendor_id))

	def __str__(self):
		parent_parts:list[str]=[]
		if self.parent_vendor is not None:
			parent_parts.append(self.parent_vendor.name)
		if self.parent is not None:
			parent_parts.append(self.parent.name)
		return "[{}] ({:04X}{:04X}) @ {}".format(self.name,self.device_id,self.vendor_id," ".join(parent_parts)).strip()

	def __repr__(self):
		return "subsystem(0x{:04x}, 0x{:04x}, {!r})".format(self.vendor_id,self.device_id,self.name)

class device:
	def __init__(self,parent,device_id:int,device_name:str):
		self.id:int=device_id
		self.name:str=device_name
		self.parent:vendor|None=parent
		self.subsystem_list:list[subsystem]=[]

	@property
	def subsystems(self)->tuple[subsystem,...]:
		return tuple(self.subsystem_list)

	@property
	def code(self)->int:
		return ((self.parent.id if self.parent is not None else 0)<<16)|self.id

	def add_subsystem(self,sub:subsystem):
		self.subsystem_list.append(sub)

	def __eq__(self,other):
		if not isinstance(other,device):
			return NotImplemented
		return self.id==other.id and self.parent==other.parent

	def __hash__(self):
		return hash((self.id,self.parent))

	def __str__(self):
		if self.parent is not None:
			return "{} {} ({:04X})".format(self.parent.name,self.name,self.id)
		return "{} ({:04X})".format(self.name,self.id)

	def __repr__(self):
		return "device(0x{:04x}, {!r})".format(self.id,self.name)

class vendor:
	def __init__(self,vendor_id:int,vendor_name:str):
		self.id:int=vendor_id
		self.name:str=vendor_name
		self.device_list:list[device]=[]

	@property
	def devices(self)->tuple[device,...]:
		return tuple(self.device_list)

	def add_device(self,dev:device):
		self.device_list.append(dev)

	def __eq__(self,other):
		if not isinstance(other,vendor):
			return NotImplemented
		return self.id==other.id

	def __hash__(self):
		return hash(self.id)

	def __str__(self):
		return "{} ({:04X})".format(self.name,self.id)

	def __repr__(self):
		return "vendor(0x{:04x}, {!r})".format(self.id,self.name)

def summarize_vendor_devices(vendor_list)->list[device]:
	l:list[device]=[]
	for v in vendor_list:
		l+=v.device_list
	return l

def summarize_subsystems(vendor_list)->list[subsystem]:
	l:list[subsystem]=[]
	for v in vendor_list:
		for d in v.device_list:
			l+=d.subsystem_list
	return l

def summarize_subclasses(class_list)->list[device_subclass]:
	l:list[device_subclass]=[]
	for c in class_list:
		l+=c.subclass_list
	return l

def summarize_programming_interfaces(class_list)->list[device_progif]:
	l:list[device_progif]=[]
	for c in class_list:
		for s in c.subclass_list:
			l+=s.progif_list
	return l
