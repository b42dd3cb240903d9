# Exceptions raised by pciresolver.

class pciresolver_error(Exception):
	pass

class address_format_error(pciresolver_error,ValueError):
	"""The address string carries no valid VEN_ or DEV_ segment."""
	def __init__(self,text,message:str="Invalid address format provided."):
		super().__init__("{}: {!r}".format(message,text))
		self.text=text

class database_load_error(pciresolver_error,RuntimeError):
	"""The catalog byte stream could not be obtained or read."""
