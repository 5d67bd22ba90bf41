import sys

from pdf_html_translator.main import main

sys.exit(main())
