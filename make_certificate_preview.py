#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render certificate previews from recipient rows and a background template.
"""

# local repo modules
import certificate_overlay.cli


if __name__ == "__main__":
	certificate_overlay.cli.main()
