from decimal import Decimal

DEFAULT_RESTAURANTS = [
    {
        'id_': 'r1',
        'name_': 'Blade & Burger',
        'image': 'https://picsum.photos/400/300?random=1',
        'rating': Decimal('4.8'),
        'delivery_time': '25-35 min',
        'categories': ['Burgers', 'American'],
        'is_verified': 'APPROVED',
        'menu': [
            {'id_': 'm1', 'restaurant_id': 'r1', 'name_': 'The Sledgehammer',
             'description': 'Double beef patty, smoked bacon, cheddar, BBQ sauce.',
             'price': Decimal('1450.00'), 'image': 'https://picsum.photos/200/200?random=11', 'category': 'Burgers'},
            {'id_': 'm2', 'restaurant_id': 'r1', 'name_': 'Steel Cut Fries',
             'description': 'Thick cut fries with sea salt and rosemary.',
             'price': Decimal('450.00'), 'image': 'https://picsum.photos/200/200?random=12', 'category': 'Sides'}
        ]
    },
    {
        'id_': 'r2',
        'name_': 'Iron Wok',
        'image': 'https://picsum.photos/400/300?random=2',
        'rating': Decimal('4.5'),
        'delivery_time': '30-45 min',
        'categories': ['Asian', 'Stir Fry'],
        'is_verified': 'APPROVED',
        'menu': [
            {'id_': 'm3', 'restaurant_id': 'r2', 'name_': 'Spicy Beef Basil',
             'description': 'Wok-seared beef with thai basil and chili.',
             'price': Decimal('1650.00'), 'image': 'https://picsum.photos/200/200?random=13', 'category': 'Mains'},
            {'id_': 'm4', 'restaurant_id': 'r2', 'name_': 'Dumplings of Fury',
             'description': 'Steamed pork dumplings with chili oil.',
             'price': Decimal('900.00'), 'image': 'https://picsum.photos/200/200?random=14', 'category': 'Appetizers'}
        ]
    },
    {
        'id_': 'r3',
        'name_': 'Timber Pizza Co.',
        'image': 'https://picsum.photos/400/300?random=3',
        'rating': Decimal('4.9'),
        'delivery_time': '40-50 min',
        'categories': ['Pizza', 'Italian'],
        'is_verified': 'APPROVED',
        'menu': [
            {'id_': 'm5', 'restaurant_id': 'r3', 'name_': 'Woodsman Special',
             'description': 'Mushrooms, truffle oil, mozzarella, thyme.',
             'price': Decimal('1800.00'), 'image': 'https://picsum.photos/200/200?random=15', 'category': 'Pizza'},
            {'id_': 'm6', 'restaurant_id': 'r3', 'name_': 'Red Axe Pepperoni',
             'description': 'Spicy pepperoni, red onions, hot honey.',
             'price': Decimal('1750.00'), 'image': 'https://picsum.photos/200/200?random=16', 'category': 'Pizza'}
        ]
    }
]
