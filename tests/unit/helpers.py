import bcrypt

PASSWORD = "counter-pass"
# Low cost keeps the suite fast; checkpw reads the cost from the hash
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(4)).decode()

TOTP_SECRET = "JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP"

APPROVAL_PIN = "4821"
APPROVAL_PIN_HASH = bcrypt.hashpw(APPROVAL_PIN.encode(), bcrypt.gensalt(4)).decode()
