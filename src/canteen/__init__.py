"""Campus canteen ordering: students, shops, menus and the order lifecycle."""
