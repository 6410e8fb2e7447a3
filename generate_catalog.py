#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Generate a product catalog PDF from a products JSON file.
"""

# local repo modules
import product_catalog_pdf.cli


if __name__ == "__main__":
	product_catalog_pdf.cli.main()
