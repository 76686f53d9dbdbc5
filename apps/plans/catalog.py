"""
Consultation plan catalog.

Plans are static marketing data, not backend records. A plan either has
packages (each with its own price) or a single price of its own. Booking
always happens against one (plan, package) pair; see booking_metadata().
"""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Package:
    name: str
    slug: str
    price: str
    duration: str = ''
    features: tuple = ()


@dataclass(frozen=True)
class Plan:
    name: str
    slug: str
    description: str
    price: str = ''
    features: tuple = ()
    packages: tuple = field(default_factory=tuple)

    def get_package(self, slug):
        for package in self.packages:
            if package.slug == slug:
                return package
        return None

    @property
    def display_price(self) -> str:
        if self.packages:
            return self.packages[0].price
        return self.price


PLANS = (
    Plan(
        name='Weight Loss Plan',
        slug='weight-loss',
        description=(
            'Weight loss with a balanced diet: no fad diets, only region-based, healthy '
            'eating patterns tailored to your lifestyle for lasting results.'
        ),
        packages=(
            Package(
                name='3 Month Package',
                slug='weight-loss-3-month',
                duration='8–10 kg weight loss',
                price='₹17,800',
                features=(
                    'Personalized diet plans for each month',
                    'Weekly follow-ups & adjustments',
                    '1-month post-program maintenance',
                ),
            ),
            Package(
                name='6 Month Package',
                slug='weight-loss-6-month',
                duration='17–20 kg weight loss',
                price='₹26,800',
                features=(
                    'Long-term transformation & lifestyle coaching',
                    'Monthly progress tracking & body measurements',
                    'Post-program maintenance plan',
                ),
            ),
        ),
    ),
    Plan(
        name='Kids Nutrition Plan',
        slug='kids-nutrition',
        description=(
            'Nutrition care for children from 6 months to 18 years: fussy eating, '
            'hyperactivity, weight issues and growth optimization.'
        ),
        packages=(
            Package(
                name='Baby First Solid Food (6 months – 2 years)',
                slug='kids-solid-food',
                price='₹5,500',
                features=(
                    'Baby readiness & tolerance discussion',
                    'Meal planning and portion guidance',
                    'Traditional & Baby-led feeding options',
                    'Custom diet plan with age-appropriate recipes',
                ),
            ),
            Package(
                name='Kids Food Plan (3–18 years)',
                slug='kids-food-plan',
                price='₹5,500',
                features=(
                    'Growth chart assessment',
                    'Custom diet plan within 48 hours',
                    'Caregiver consultation',
                ),
            ),
        ),
    ),
    Plan(
        name='Medical Management Plan',
        slug='medical-management',
        description=(
            'Nutrition for PCOS/PCOD, diabetes, hypertension, CKD, liver disorders, '
            'arthritis, anaemia and more, alongside your doctor.'
        ),
        price='₹5,500',
        features=(
            'Condition-specific nutritional plan',
            'Doctor-approved dietary guidance',
            'Natural supplement support (as advised)',
        ),
    ),
    Plan(
        name='Wedding Glow Plan (Bride & Groom)',
        slug='wedding-glow',
        description='Glowing skin, high energy and a healthy body before your big day.',
        price='₹3,000',
        features=(
            'Custom glow diet plan',
            'Detox & hydration strategy',
            'Skin-nourishing recipes',
            'Healthy shopping & snack guide',
        ),
    ),
    Plan(
        name='Corporate Wellness Plan',
        slug='corporate-plan',
        description='Workplace wellness: body composition analysis, lifestyle education and canteen audits.',
        price='₹6,800/session',
        features=(
            '30-min workshop + 10-min personalized discussion',
            'BMI and body composition analysis',
            'Lifestyle & stress management guidance',
            'Healthy food options for office canteens',
        ),
    ),
)

_BY_SLUG = {plan.slug: plan for plan in PLANS}


def get_plan(slug):
    return _BY_SLUG.get(slug)


def booking_metadata(plan: Plan, package_slug=None) -> dict:
    """
    Plan fields for the booking form. Unknown or missing package slugs fall
    back to the plan's first package.
    """
    package = plan.get_package(package_slug) or (plan.packages[0] if plan.packages else None)
    if package is None:
        return {
            'plan_slug': plan.slug,
            'plan_name': plan.name,
            'plan_price': plan.price,
            'plan_package_name': '',
            'plan_duration': '',
        }
    return {
        'plan_slug': plan.slug,
        'plan_name': plan.name,
        'plan_price': package.price,
        'plan_package_name': package.name,
        'plan_duration': package.duration,
    }
