"""Tests for the lookup registry."""

import io
import threading
import time

import pytest

from pciresolver import (address_class,address_subsystem,bytes_source,database_load_error,default_registry,
	parse_address,pci_address,pci_registry)

class TestLoading:
	def test_loads_lazily_and_once(self,catalog_bytes):
		calls=[]
		def source():
			calls.append(1)
			return io.BytesIO(catalog_bytes)

		r=pci_registry(source)
		assert not r.is_loaded
		assert calls==[]
		assert r.get_vendor(0x10DE) is not None
		assert r.is_loaded
		r.vendors
		r.classes
		assert len(calls)==1

	def test_source_may_return_bytes(self,catalog_bytes):
		r=pci_registry(lambda:catalog_bytes)
		assert len(r.vendors)==5

	def test_metadata(self,registry):
		assert registry.version=="2024.02.02"
		assert registry.date=="2024-02-02 03:15:02"

	def test_concurrent_first_access_parses_once(self,catalog_bytes):
		calls=[]
		def slow_source():
			calls.append(1)
			time.sleep(0.05)
			return io.BytesIO(catalog_bytes)

		r=pci_registry(slow_source)
		barrier=threading.Barrier(8)
		results=[]
		def reader():
			barrier.wait()
			results.append(len(r.vendors))

		threads=[threading.Thread(target=reader) for _ in range(8)]
		for t in threads:
			t.start()
		for t in threads:
			t.join()
		assert calls==[1]
		assert results==[5]*8

	def test_unreadable_source(self):
		def source():
			raise database_load_error("gone")

		r=pci_registry(source)
		with pytest.raises(database_load_error):
			r.get_vendor(0x10DE)
		assert not r.is_loaded

	def test_reload_is_idempotent(self,registry):
		before=[(v.id,v.name,len(v.devices)) for v in registry.vendors]
		device_before=registry.get_device(0x10DE,0x1180)
		registry.reload()
		registry.reload()
		assert [(v.id,v.name,len(v.devices)) for v in registry.vendors]==before
		assert registry.get_device(0x10DE,0x1180)==device_before
		assert registry.get_progif(0x02,0x00,0x00).name=="Generic Interface"

	def test_reload_swaps_catalog(self,registry):
		old_vendors=registry.vendors
		registry.reload(b"8086  Intel Corporation\n\t1237  440FX - 82441FX PMC [Natoma]\n")
		assert registry.get_vendor(0x10DE) is None
		assert registry.get_device(0x8086,0x1237).name=="440FX - 82441FX PMC [Natoma]"
		assert registry.classes==()
		# Earlier snapshots are left untouched.
		assert len(old_vendors)==5

	def test_failed_reload_keeps_catalog(self,registry):
		assert registry.get_vendor(0x10DE) is not None
		def broken():
			raise database_load_error("gone")

		with pytest.raises(database_load_error):
			registry.reload(broken)
		assert registry.get_vendor(0x10DE).name=="NVIDIA Corporation"

	def test_failed_reload_keeps_source(self,registry):
		assert registry.get_vendor(0x10DE) is not None
		def broken():
			raise database_load_error("gone")

		with pytest.raises(database_load_error):
			registry.reload(broken)
		registry.reload()
		assert registry.get_vendor(0x10DE).name=="NVIDIA Corporation"

	def test_failed_first_reload_keeps_source(self,catalog_bytes):
		r=pci_registry(catalog_bytes)
		def broken():
			raise database_load_error("gone")

		with pytest.raises(database_load_error):
			r.reload(broken)
		assert not r.is_loaded
		assert len(r.vendors)==5

	def test_source_without_context_manager(self,catalog_bytes):
		class plain_reader:
			def read(self):
				return catalog_bytes

		r=pci_registry(plain_reader)
		assert r.get_vendor(0x1043).name=="ASUSTeK Computer Inc."

	def test_default_registry_is_shared(self):
		assert default_registry() is default_registry()

class TestVendorQueries:
	def test_vendor(self,registry):
		v=registry.get_vendor(0x1043)
		assert v.name=="ASUSTeK Computer Inc."
		assert registry.get_vendor(0xFFFF) is None

	def test_first_match_wins(self,registry):
		v=registry.get_vendor(0x10DE)
		assert v.name=="NVIDIA Corporation"
		assert registry.get_device(0x10DE,0x1180).name=="GK104 [GeForce GTX 680]"

	def test_duplicate_vendors_are_kept(self,registry):
		assert [v.name for v in registry.vendors if v.id==0x10DE]==["NVIDIA Corporation","NVIDIA Corporation (duplicate)"]

	def test_first_match_on_crafted_stream(self):
		r=pci_registry(b"abcd  First name\nabcd  Second name\n")
		assert r.get_vendor(0xABCD).name=="First name"

	def test_device_belongs_to_vendor(self,registry):
		for v in registry.vendors:
			for d in v.devices:
				found=registry.get_device(v.id,d.id)
				assert found.parent.id==v.id

	def test_device_misses(self,registry):
		assert registry.get_device(0x10DE,0xFFFF) is None
		assert registry.get_device(0xFFFF,0x1180) is None

	def test_lookups_by_address(self,registry):
		a=parse_address("PCI\\VEN_10DE&DEV_1180&SUBSYS_04321043&REV_A1")
		assert registry.get_vendor_by_address(a).id==0x10DE
		assert registry.get_device_by_address(a).name=="GK104 [GeForce GTX 680]"
		s=registry.get_subsystem_by_address(a)
		assert s.name=="GeForce GTX 680 DirectCU II"
		assert s.parent.id==0x1180
		assert s.parent_vendor.id==0x10DE

	def test_subsystem_lookup_uses_own_ids(self,registry):
		sub=address_subsystem(0x1043,0x0432)
		assert registry.get_vendor_by_subsystem(sub).name=="ASUSTeK Computer Inc."
		assert registry.get_device_by_subsystem(sub).name=="GeForce GTX 680 DirectCU II Board"

	def test_subsystem(self,registry):
		s=registry.get_subsystem(0x10DE,0x1180,0x10DE,0x0969)
		assert s.name=="GeForce GTX 680"
		assert registry.get_subsystem(0x10DE,0x1180,0x0969,0x10DE) is None
		assert registry.get_subsystem(0x10DE,0x1C82,0x10DE,0x0969) is None
		assert registry.get_subsystem(0xFFFF,0x1180,0x10DE,0x0969) is None

	def test_subsystem_by_address_requires_subsystem(self,registry):
		with pytest.raises(ValueError):
			registry.get_subsystem_by_address(pci_address(0x10DE,0x1180))

	def test_describe_subsystem(self,registry):
		s=registry.get_subsystem(0x10DE,0x1180,0x1043,0x0432)
		assert registry.describe_subsystem(s)==(
			"ASUSTeK Computer Inc. GeForce GTX 680 DirectCU II Board [GeForce GTX 680 DirectCU II] (04321043) "
			"@ NVIDIA Corporation GK104 [GeForce GTX 680]")

	def test_describe_subsystem_with_unknown_own_ids(self,registry):
		s=registry.get_subsystem(0x10DE,0x1180,0x10DE,0x0969)
		assert registry.describe_subsystem(s)=="NVIDIA Corporation [GeForce GTX 680] (096910DE) @ NVIDIA Corporation GK104 [GeForce GTX 680]"

	def test_describe_subsystem_uses_one_catalog(self,registry,monkeypatch):
		s=registry.get_subsystem(0x10DE,0x1180,0x1043,0x0432)
		calls=[]
		snapshot=registry._snapshot
		def counting_snapshot():
			calls.append(1)
			return snapshot()
		monkeypatch.setattr(registry,"_snapshot",counting_snapshot)
		assert registry.describe_subsystem(s).startswith("ASUSTeK Computer Inc. GeForce GTX 680 DirectCU II Board [")
		assert calls==[1]

class TestFirstMatch:
	"""Duplicate entries stay in the catalog; every level resolves to the earliest one."""

	CATALOG=(
		b"abcd  Vendor\n"
		b"\t0001  First device\n"
		b"\t\t1111 2222  First variant\n"
		b"\t\t1111 2222  Second variant\n"
		b"\t0001  Second device\n"
		b"C 05  First class\n"
		b"\t80  First subclass\n"
		b"\t\t01  First interface\n"
		b"\t\t01  Second interface\n"
		b"\t80  Second subclass\n"
		b"C 05  Second class\n"
	)

	@pytest.fixture
	def duplicates(self)->pci_registry:
		return pci_registry(self.CATALOG)

	def test_device(self,duplicates):
		assert duplicates.get_device(0xABCD,0x0001).name=="First device"
		assert len(duplicates.get_vendor(0xABCD).devices)==2

	def test_subsystem(self,duplicates):
		assert duplicates.get_subsystem(0xABCD,0x0001,0x1111,0x2222).name=="First variant"

	def test_base_class(self,duplicates):
		assert duplicates.get_base_class(0x05).name=="First class"
		assert len(duplicates.classes)==2

	def test_subclass(self,duplicates):
		assert duplicates.get_subclass(0x05,0x80).name=="First subclass"

	def test_progif(self,duplicates):
		assert duplicates.get_progif(0x05,0x80,0x01).name=="First interface"
		assert duplicates.get_progif_by_class(address_class(0x05,0x80,0x01)).name=="First interface"

class TestClassQueries:
	def test_base_class(self,registry):
		assert registry.get_base_class(0x02).name=="Network controller"
		assert registry.get_base_class(0xFE) is None

	def test_subclass(self,registry):
		s=registry.get_subclass(0x01,0x06)
		assert s.name=="SATA controller"
		assert s.parent.id==0x01
		assert registry.get_subclass(0x01,0x07) is None
		assert registry.get_subclass(0xFE,0x06) is None

	def test_progif(self,registry):
		assert registry.get_progif(0x01,0x06,0x01).name=="AHCI 1.0"
		assert registry.get_progif(0x01,0x06,0x02) is None
		assert registry.get_progif(0x01,0x07,0x01) is None

	def test_lookups_by_address_class(self,registry):
		c=address_class(0x01,0x06,0x01)
		assert registry.get_base_class_by_class(c).name=="Mass storage controller"
		assert registry.get_subclass_by_class(c).name=="SATA controller"
		assert registry.get_progif_by_class(c).name=="AHCI 1.0"

	def test_progif_needs_interface_id(self,registry):
		assert registry.get_progif_by_class(address_class(0x01,0x06)) is None

	def test_class_from_address(self,registry):
		a=parse_address("PCI\\VEN_8086&DEV_2922&CC_010601")
		assert registry.get_progif_by_class(a.device_class).name=="AHCI 1.0"

class TestStats:
	def test_counts(self,registry):
		assert registry.stats()=={
			"vendors":5,
			"devices":5,
			"subsystems":2,
			"classes":3,
			"subclasses":3,
			"progifs":3,
			"version":"2024.02.02",
			"date":"2024-02-02 03:15:02",
		}

	def test_bytes_source_is_reusable(self,catalog_bytes):
		r=pci_registry(bytes_source(catalog_bytes))
		first=r.stats()
		r.reload()
		assert r.stats()==first
