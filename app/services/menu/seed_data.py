"""
Bundled menu catalog.

Loaded into an empty store at startup and by POST /api/seed-menu.
Prices are in rupees.
"""

MENU_SEED = [
    # Appetizers
    {
        "name": "Paneer Tikka",
        "description": "Cottage cheese cubes marinated in spiced yogurt, chargrilled",
        "price": 279,
        "category": "appetizer",
        "image": "/images/paneer-tikka.jpg",
        "rating": 4.6,
        "prep_time": 15,
        "is_veg": True,
        "spice_level": 2,
        "popular": True,
    },
    {
        "name": "Chicken Tikka",
        "description": "Boneless chicken in tandoori masala, cooked in the clay oven",
        "price": 389,
        "category": "appetizer",
        "image": "/images/chicken-tikka.jpg",
        "rating": 4.7,
        "prep_time": 18,
        "spice_level": 2,
        "popular": True,
    },
    {
        "name": "Garlic Bread",
        "description": "Toasted baguette with garlic butter and herbs",
        "price": 149,
        "category": "appetizer",
        "image": "/images/garlic-bread.jpg",
        "rating": 4.3,
        "prep_time": 8,
        "is_veg": True,
    },
    {
        "name": "Crispy Corn",
        "description": "Golden fried sweet corn tossed with pepper and onion",
        "price": 199,
        "category": "appetizer",
        "image": "/images/crispy-corn.jpg",
        "rating": 4.2,
        "prep_time": 10,
        "is_veg": True,
        "spice_level": 1,
    },
    # Mains
    {
        "name": "Margherita Pizza",
        "description": "San Marzano tomato, fresh mozzarella and basil",
        "price": 349,
        "category": "main",
        "image": "/images/margherita.jpg",
        "rating": 4.8,
        "prep_time": 20,
        "is_veg": True,
        "popular": True,
        "chef_special": True,
    },
    {
        "name": "Farmhouse Pizza",
        "description": "Capsicum, onion, mushroom and sweet corn",
        "price": 399,
        "category": "main",
        "image": "/images/farmhouse.jpg",
        "rating": 4.5,
        "prep_time": 22,
        "is_veg": True,
    },
    {
        "name": "Butter Chicken",
        "description": "Tandoori chicken simmered in a creamy tomato gravy",
        "price": 449,
        "category": "main",
        "image": "/images/butter-chicken.jpg",
        "rating": 4.9,
        "prep_time": 25,
        "spice_level": 1,
        "popular": True,
        "chef_special": True,
    },
    {
        "name": "Dal Makhani",
        "description": "Black lentils slow cooked overnight with butter and cream",
        "price": 299,
        "category": "main",
        "image": "/images/dal-makhani.jpg",
        "rating": 4.6,
        "prep_time": 15,
        "is_veg": True,
        "spice_level": 1,
    },
    {
        "name": "Penne Arrabbiata",
        "description": "Penne in a fiery tomato and chilli sauce",
        "price": 329,
        "category": "main",
        "image": "/images/arrabbiata.jpg",
        "rating": 4.4,
        "prep_time": 18,
        "is_veg": True,
        "spice_level": 3,
    },
    # Desserts
    {
        "name": "Chocolate Lava Cake",
        "description": "Warm chocolate cake with a molten centre",
        "price": 199,
        "category": "dessert",
        "image": "/images/lava-cake.jpg",
        "rating": 4.8,
        "prep_time": 12,
        "is_veg": True,
        "popular": True,
    },
    {
        "name": "Gulab Jamun",
        "description": "Milk dumplings soaked in rose cardamom syrup",
        "price": 129,
        "category": "dessert",
        "image": "/images/gulab-jamun.jpg",
        "rating": 4.5,
        "prep_time": 5,
        "is_veg": True,
    },
    {
        "name": "Tiramisu",
        "description": "Espresso soaked ladyfingers layered with mascarpone",
        "price": 249,
        "category": "dessert",
        "image": "/images/tiramisu.jpg",
        "rating": 4.6,
        "prep_time": 5,
        "is_veg": True,
    },
    # Beverages
    {
        "name": "Fresh Lime Soda",
        "description": "Sweet or salted, with fresh lime",
        "price": 99,
        "category": "beverage",
        "image": "/images/lime-soda.jpg",
        "rating": 4.4,
        "prep_time": 3,
        "is_veg": True,
    },
    {
        "name": "Mango Lassi",
        "description": "Alphonso mango blended with chilled yogurt",
        "price": 149,
        "category": "beverage",
        "image": "/images/mango-lassi.jpg",
        "rating": 4.7,
        "prep_time": 5,
        "is_veg": True,
        "popular": True,
    },
    {
        "name": "Cold Coffee",
        "description": "Iced coffee shaken with milk and vanilla ice cream",
        "price": 169,
        "category": "beverage",
        "image": "/images/cold-coffee.jpg",
        "rating": 4.5,
        "prep_time": 5,
        "is_veg": True,
    },
    {
        "name": "Masala Chai",
        "description": "Spiced milk tea",
        "price": 79,
        "category": "beverage",
        "image": "/images/masala-chai.jpg",
        "rating": 4.3,
        "prep_time": 5,
        "is_veg": True,
        "available": False,
    },
]
