"""Wire schemas shared by the business portal server and its clients."""
