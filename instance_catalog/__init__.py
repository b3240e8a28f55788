"""Instance Catalog - discover, group and observe application instances."""
