"""Language server for defgen descriptor documents."""
