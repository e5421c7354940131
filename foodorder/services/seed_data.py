"""
Default menu inserted when the catalog is empty on first startup.
"""

_IMG = "https://images.unsplash.com/photo-{}?w=500"

DEFAULT_MENU = [
    # Burgers
    {"name": "Chicken Burger", "category": "Burger", "price": 199, "rating": 4.5,
     "image": _IMG.format("1568901346375-23c9450c58cd"),
     "description": "Juicy chicken patty with fresh vegetables"},
    {"name": "Veg Burger", "category": "Burger", "price": 149, "rating": 4.3,
     "image": _IMG.format("1520072959219-c595dc870360"),
     "description": "Delicious vegetable patty burger"},
    {"name": "Cheese Burger", "category": "Burger", "price": 179, "rating": 4.6,
     "image": _IMG.format("1586190848861-99aa4a171e90"),
     "description": "Double cheese loaded burger"},

    # Biryani
    {"name": "Veg Biryani", "category": "Biryani", "price": 249, "rating": 4.7,
     "image": _IMG.format("1563379091339-03b21ab4a4f8"),
     "description": "Aromatic basmati rice with vegetables"},
    {"name": "Chicken Biryani", "category": "Biryani", "price": 299, "rating": 4.8,
     "image": _IMG.format("1563379091339-03b21ab4a4f8"),
     "description": "Traditional chicken biryani with spices"},
    {"name": "Mutton Biryani", "category": "Biryani", "price": 349, "rating": 4.9,
     "image": _IMG.format("1633945274309-c440f7e1f99e"),
     "description": "Premium mutton biryani"},

    # Starters
    {"name": "Paneer Tikka", "category": "Starter", "price": 179, "rating": 4.4,
     "image": _IMG.format("1567188040759-fb8a883dc6d8"),
     "description": "Grilled paneer cubes with spices"},
    {"name": "Chicken Tikka", "category": "Starter", "price": 229, "rating": 4.6,
     "image": _IMG.format("1599487488170-d11ec9c172f0"),
     "description": "Tandoori chicken tikka"},
    {"name": "French Fries", "category": "Starter", "price": 99, "rating": 4.2,
     "image": _IMG.format("1573080496219-bb080dd4f877"),
     "description": "Crispy golden french fries"},

    # Beverages
    {"name": "Chocolate Shake", "category": "Beverage", "price": 129, "rating": 4.5,
     "image": _IMG.format("1572490122747-3968b75cc699"),
     "description": "Thick chocolate milkshake"},
    {"name": "Mango Shake", "category": "Beverage", "price": 119, "rating": 4.4,
     "image": _IMG.format("1623065422902-30a2d299bbe4"),
     "description": "Fresh mango smoothie"},
    {"name": "Cold Coffee", "category": "Beverage", "price": 139, "rating": 4.6,
     "image": _IMG.format("1517487881594-2787fef5ebf7"),
     "description": "Chilled coffee with ice cream"},

    # Pizza
    {"name": "Margherita Pizza", "category": "Pizza", "price": 299, "rating": 4.5,
     "image": _IMG.format("1574071318508-1cdbab80d002"),
     "description": "Classic cheese and tomato pizza"},
    {"name": "Pepperoni Pizza", "category": "Pizza", "price": 349, "rating": 4.7,
     "image": _IMG.format("1628840042765-356cda07504e"),
     "description": "Loaded with pepperoni slices"},
    {"name": "Veg Supreme Pizza", "category": "Pizza", "price": 329, "rating": 4.6,
     "image": _IMG.format("1571997478779-2adcbbe9ab2f"),
     "description": "Loaded with fresh vegetables"},

    # Pasta
    {"name": "Pasta Alfredo", "category": "Pasta", "price": 249, "rating": 4.4,
     "image": _IMG.format("1621996346565-e3dbc646d9a9"),
     "description": "Creamy white sauce pasta"},
    {"name": "Pasta Arrabiata", "category": "Pasta", "price": 229, "rating": 4.3,
     "image": _IMG.format("1598866594230-a7c12756260f"),
     "description": "Spicy red sauce pasta"},
    {"name": "Mac and Cheese", "category": "Pasta", "price": 199, "rating": 4.5,
     "image": _IMG.format("1543339494-b4cd4f7ba686"),
     "description": "Cheesy macaroni pasta"},

    # Snacks
    {"name": "Samosa", "category": "Snacks", "price": 49, "rating": 4.2,
     "image": _IMG.format("1601050690597-df0568f70950"),
     "description": "Crispy fried samosas"},
    {"name": "Spring Rolls", "category": "Snacks", "price": 129, "rating": 4.3,
     "image": _IMG.format("1541529086526-db283c563270"),
     "description": "Crunchy vegetable spring rolls"},
    {"name": "Nachos", "category": "Snacks", "price": 179, "rating": 4.4,
     "image": _IMG.format("1513456852971-30c0b8199d4d"),
     "description": "Nachos with cheese and salsa"},

    # Salads
    {"name": "Caesar Salad", "category": "Salad", "price": 199, "rating": 4.3,
     "image": _IMG.format("1546793665-c74683f339c1"),
     "description": "Fresh caesar salad with dressing"},
    {"name": "Greek Salad", "category": "Salad", "price": 189, "rating": 4.2,
     "image": _IMG.format("1540189549336-e6e99c3679fe"),
     "description": "Mediterranean style salad"},
    {"name": "Garden Salad", "category": "Salad", "price": 159, "rating": 4.1,
     "image": _IMG.format("1512621776951-a57141f2eefd"),
     "description": "Mixed green salad"},

    # Desserts
    {"name": "Gulab Jamun", "category": "Dessert", "price": 89, "rating": 4.6,
     "image": _IMG.format("1589301760014-d929f3979dbc"),
     "description": "Traditional Indian sweet"},
    {"name": "Ice Cream Sundae", "category": "Dessert", "price": 129, "rating": 4.5,
     "image": _IMG.format("1563805042-7684c019e1cb"),
     "description": "Delicious ice cream with toppings"},
    {"name": "Chocolate Brownie", "category": "Dessert", "price": 149, "rating": 4.7,
     "image": _IMG.format("1564355808853-1d0e0c9143ea"),
     "description": "Rich chocolate brownie with ice cream"},
    {"name": "Cheesecake", "category": "Dessert", "price": 179, "rating": 4.8,
     "image": _IMG.format("1533134242820-b2df5ad4b8cf"),
     "description": "Creamy New York style cheesecake"},

    # Chinese
    {"name": "Noodles", "category": "Chinese", "price": 169, "rating": 4.4,
     "image": _IMG.format("1585032226651-759b368d7246"),
     "description": "Hakka noodles with vegetables"},
    {"name": "Fried Rice", "category": "Chinese", "price": 179, "rating": 4.3,
     "image": _IMG.format("1603133872878-684f208fb84b"),
     "description": "Chinese style fried rice"},
]
