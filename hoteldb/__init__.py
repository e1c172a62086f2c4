__version__ = '0.1.0'
__license__ = 'GPLv3'
