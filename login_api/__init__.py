"""Email/password login and signup service issuing signed bearer tokens."""
