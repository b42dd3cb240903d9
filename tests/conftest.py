import pytest

from pciresolver import pci_registry

CATALOG_TEXT="""#
#\tList of PCI ID's
#
#\tVersion: 2024.02.02
#\tDate:    2024-02-02 03:15:02
#

# Vendors, devices and subsystems.
0001  SafeNet (wrong ID)
0010  Allied Telesis, Inc (Wrong ID)
\t8139  AT-2500TX V3 Ethernet
1043  ASUSTeK Computer Inc.
\t0432  GeForce GTX 680 DirectCU II Board
10de  NVIDIA Corporation
\t1180  GK104 [GeForce GTX 680]
\t\t1043 0432  GeForce GTX 680 DirectCU II
\t\t10de 0969  GeForce GTX 680
\t1c82  GP107 [GeForce GTX 1050 Ti]
10de  NVIDIA Corporation (duplicate)
\t1180  Shadowed device

# List of known device classes, subclasses and programming interfaces
C 00  Unclassified device
\t00  Non-VGA unclassified device
C 01  Mass storage controller
\t06  SATA controller
\t\t00  Vendor specific
\t\t01  AHCI 1.0
C 02  Network controller
\t00  Ethernet controller
\t\t00  Generic Interface
"""

@pytest.fixture
def catalog_text()->str:
	return CATALOG_TEXT

@pytest.fixture
def catalog_bytes(catalog_text)->bytes:
	return catalog_text.encode("utf-8")

@pytest.fixture
def registry(catalog_bytes)->pci_registry:
	return pci_registry(catalog_bytes)
