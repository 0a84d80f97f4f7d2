"""Secret Vault Meta information.
   Secret Vault encrypts, hashes and masks sensitive configuration values.
"""
__title__ = 'secret_vault'
__description__ = (
   'Secret Vault encrypts sensitive configuration values at rest '
   'and verifies one-way hashes and signed tokens.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/secret-vault'
