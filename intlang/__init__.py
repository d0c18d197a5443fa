__version__ = "1.0"
__url__ = "https://github.com/lucaswerkmeister/setup-int-lang/"
