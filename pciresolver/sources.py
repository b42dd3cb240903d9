# Byte-stream sources for the PCI-ID database.
# A source is a callable with no arguments returning a readable binary stream; it is called once per load.
import io
import logging
import os

import requests

from .config import config as default_config,resolver_config
from .errors import database_load_error

logger=logging.getLogger(__name__)

def bytes_source(data:bytes):
	data=bytes(data)
	def opener():
		return io.BytesIO(data)
	return opener

def file_source(path:str):
	def opener():
		try:
			return open(path,'rb')
		except OSError as e:
			raise database_load_error("Cannot open PCI-ID database {}: {}".format(path,e)) from e
	return opener

def find_database_path(cfg:resolver_config|None=None)->str|None:
	"""Return the first existing pci.ids: the configured path, then the system locations."""
	cfg=cfg or default_config
	if cfg.database_path:
		if os.path.isfile(cfg.database_path):
			return os.path.abspath(cfg.database_path)
		logger.warning("Configured PCI-ID database not found: %s",cfg.database_path)
	for candidate in cfg.search_paths:
		if os.path.isfile(candidate):
			return candidate
	return None

def download_database(url:str,dest:str|None=None,timeout:float=30.0)->bytes:
	"""
	Fetch pci.ids from url, optionally keeping a raw copy at dest.

	Raises database_load_error on network failures and error statuses.
	"""
	logger.info("Downloading PCI-ID database from %s",url)
	try:
		r=requests.get(url,timeout=timeout)
		r.raise_for_status()
	except requests.RequestException as e:
		raise database_load_error("Cannot download PCI-ID database from {}: {}".format(url,e)) from e
	data=r.content
	if dest is not None:
		try:
			with open(dest,'wb') as f:
				f.write(data)
		except OSError as e:
			raise database_load_error("Cannot write PCI-ID database to {}: {}".format(dest,e)) from e
	return data

def url_source(url:str,timeout:float=30.0):
	def opener():
		return io.BytesIO(download_database(url,timeout=timeout))
	return opener

def default_source(cfg:resolver_config|None=None):
	cfg=cfg or default_config
	path=find_database_path(cfg)
	if path is not None:
		return file_source(path)
	if cfg.allow_download:
		return url_source(cfg.database_url,cfg.download_timeout)
	raise database_load_error("No PCI-ID database found in {} and downloading is disabled".format(", ".join(cfg.search_paths)))
